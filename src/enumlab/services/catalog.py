"""CatalogService — describe the registered unions and enumerations.

Read-only. Importing this module imports every domain module that
registers a union, so the registry is complete before the first lookup.
"""

from __future__ import annotations

import difflib
import logging
from enum import Enum
from typing import Any

from enumlab.domain import account, generics, recursive  # noqa: F401  (register unions)
from enumlab.domain.capabilities import CAPABILITY_REGISTRY, Capability, capabilities_of
from enumlab.domain.catalog import ENUM_CATALOG
from enumlab.domain.union import UNION_REGISTRY, UnionType
from enumlab.services.base import BaseService
from enumlab.services.result import ServiceResult
from enumlab.services.telemetry import traced

logger = logging.getLogger(__name__)


def _all_enums() -> dict[str, type[Enum]]:
    enums = dict(ENUM_CATALOG)
    for kind in CAPABILITY_REGISTRY:
        enums.setdefault(kind.__name__, kind)
    return enums


def _capability_names(kind: type[Enum]) -> list[str]:
    mask = capabilities_of(kind)
    return [c.name for c in Capability if c in mask]


def _describe_union(union: UnionType) -> dict[str, Any]:
    return {
        "name": union.name,
        "kind": "union",
        "doc": union.doc or "",
        "params": list(union.params),
        "recursive": union.is_recursive(),
        "variants": [
            {
                "name": v.name,
                "signature": v.describe(),
                "fields": [f.describe() for f in v.fields],
                "doc": v.doc or "",
            }
            for v in union.variants
        ],
    }


def _describe_enum(name: str, kind: type[Enum]) -> dict[str, Any]:
    return {
        "name": name,
        "kind": "enum",
        "doc": _first_line(kind.__doc__),
        "members": [{"name": m.name, "value": _raw(m.value)} for m in kind],
        "capabilities": _capability_names(kind),
    }


def _first_line(text: str | None) -> str:
    lines = (text or "").strip().splitlines()
    return lines[0] if lines else ""


def _raw(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value


class CatalogService(BaseService):
    """Lists and describes everything ``enumlab describe`` can show."""

    @traced("catalog.list")
    def list_all(self) -> ServiceResult:
        items: list[dict[str, Any]] = []
        for name, union in sorted(UNION_REGISTRY.items()):
            items.append(
                {
                    "name": name,
                    "kind": "union",
                    "size": len(union),
                    "recursive": union.is_recursive(),
                    "params": list(union.params),
                }
            )
        for name, kind in sorted(_all_enums().items()):
            items.append({"name": name, "kind": "enum", "size": len(kind)})
        return ServiceResult.success("list", {"count": len(items), "items": items})

    @traced("catalog.describe")
    def describe(self, name: str) -> ServiceResult:
        union = UNION_REGISTRY.get(name)
        if union is not None:
            return ServiceResult.success("describe", _describe_union(union))
        enums = _all_enums()
        if name in enums:
            return ServiceResult.success("describe", _describe_enum(name, enums[name]))

        known = [*UNION_REGISTRY, *enums]
        suggestions = difflib.get_close_matches(name, known, n=3)
        logger.debug("Unknown union requested: %s", name)
        return ServiceResult.failure(
            "describe",
            "UNKNOWN_UNION",
            f"No union or enum named {name!r}",
            name=name,
            suggestions=suggestions,
        )
