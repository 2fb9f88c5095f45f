"""Configuration layer — TOML discovery, settings models, and logging setup."""
