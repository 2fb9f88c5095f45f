"""Contract violations raised by the tagged union engine.

These are programmer errors: a payload of the wrong shape, a match that
forgets a variant, a definition that can never be satisfied. They are
raised eagerly and never caught inside the library.
"""

from __future__ import annotations

from collections.abc import Iterable


class UnionContractError(Exception):
    """Base class for every tagged-union contract violation."""


class UnionDefinitionError(UnionContractError):
    """A union or variant definition is malformed."""


class UnknownVariant(UnionContractError):
    """A variant name that is not part of the union."""

    def __init__(self, union: str, tag: str) -> None:
        self.union = union
        self.tag = tag
        super().__init__(f"{union} has no variant named {tag!r}")


class ShapeMismatch(UnionContractError):
    """A payload does not fit the variant's declared shape."""

    def __init__(self, union: str, tag: str, reason: str) -> None:
        self.union = union
        self.tag = tag
        self.reason = reason
        super().__init__(f"{union}.{tag}: {reason}")


class NonExhaustiveMatch(UnionContractError):
    """A match does not provide a handler for every variant."""

    def __init__(self, union: str, missing: Iterable[str]) -> None:
        self.union = union
        self.missing = tuple(missing)
        super().__init__(f"match over {union} is missing handlers for: {', '.join(self.missing)}")
