"""Generic unions — type parameters resolved where the union is used.

``Maybe[int]`` and ``Either[str, int]`` are specializations of the
definitions below; the parameter names only become concrete types at the
use site.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from enumlab.domain.fields import SequenceOf, TypeParam
from enumlab.domain.union import Field, TaggedValue, UnionType, Variant, register_union

T = TypeParam("T")
L = TypeParam("L")
R = TypeParam("R")
Item = TypeParam("Item")

Maybe = register_union(
    UnionType(
        "Maybe",
        Variant("Some", T),
        Variant("Nothing"),
        params=("T",),
        doc="A value that may be absent.",
    )
)

Either = register_union(
    UnionType(
        "Either",
        Variant("Left", L, doc="Conventionally the failure side."),
        Variant("Right", R, doc="Conventionally the success side."),
        params=("L", "R"),
        doc="One value of two possible types.",
    )
)

Bag = register_union(
    UnionType(
        "Bag",
        Variant("Empty"),
        Variant(
            "Full",
            Field("contents", SequenceOf(T)),
            invariant=lambda contents: bool(contents),
        ),
        params=("T",),
        doc="Either empty, or holding a non-empty sequence.",
    )
)

Change = register_union(
    UnionType(
        "Change",
        Variant("Insertion", Field("items", SequenceOf(Item))),
        Variant("Deletion", Field("items", SequenceOf(Item))),
        Variant("Update", Field("items", SequenceOf(Item))),
        params=("Item",),
        doc="A notification that items in a collection changed.",
    )
)


def maybe_from(value: Any, union: UnionType = Maybe) -> TaggedValue:
    """``Nothing`` for None, otherwise ``Some(value)``."""
    if value is None:
        return union.Nothing
    return union.Some(value)


def maybe_or(value: TaggedValue, default: Any) -> Any:
    return Maybe.matcher(Some=lambda v: v, Nothing=lambda: default)(value)


def either_map(
    value: TaggedValue,
    fn: Callable[[Any], Any],
    into: UnionType | None = None,
) -> TaggedValue:
    """Apply *fn* to a ``Right`` payload; pass a ``Left`` through.

    The result belongs to *into*, by default the union of *value*, so an
    ``Either[str, int]`` stays ``Either[str, int]``. When *fn* changes the
    right-hand type, pass the specialization it produces as *into*.
    """
    target = value.union if into is None else into
    return Either.matcher(
        Left=lambda v: value if target is value.union else target.Left(v),
        Right=lambda v: target.Right(fn(v)),
    )(value)


def bag_of(items: list[Any] | tuple[Any, ...], union: UnionType = Bag) -> TaggedValue:
    return union.Full(contents=items) if items else union.Empty


def apply_change(
    items: list[Any],
    change: TaggedValue,
    key: Callable[[Any], Any] = lambda item: item,
) -> list[Any]:
    """Return a new list with *change* applied.

    *key* identifies an item across versions: deletions drop items whose
    key matches, updates replace them in place.
    """

    def _delete(removed: tuple[Any, ...]) -> list[Any]:
        gone = {key(r) for r in removed}
        return [i for i in items if key(i) not in gone]

    def _update(updated: tuple[Any, ...]) -> list[Any]:
        fresh = {key(u): u for u in updated}
        return [fresh.get(key(i), i) for i in items]

    return Change.matcher(
        Insertion=lambda added: [*items, *added],
        Deletion=_delete,
        Update=_update,
    )(change)
