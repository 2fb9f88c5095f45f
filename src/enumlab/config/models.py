"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, enumlab.toml only contains overrides.
An empty (or absent) enumlab.toml is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- enumlab.toml sections ---


class AccountConfig(BaseModel):
    """[account] section."""

    model_config = {"frozen": True}

    opening_funds: int = Field(default=0, ge=0)
    currency: str = "credits"


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    width: int = Field(default=100, ge=40)
