"""Tagged union engine — closed sets of mutually exclusive named variants.

A :class:`UnionType` is defined once from a fixed list of :class:`Variant`
objects. Each variant declares the shape of its payload; constructing a
value checks the payload against that shape and freezes it. Matching
requires a handler for every variant and checks that requirement before
any handler runs.

Usage::

    Shape = UnionType(
        "Shape",
        Variant("Circle", Field("radius", float)),
        Variant("Square", Field("side", float)),
    )
    area = Shape.matcher(
        Circle=lambda r: 3.14159 * r * r,
        Square=lambda s: s * s,
    )
    area(Shape.Square(side=2.0))  # 4.0

INVARIANT: the variant set of a union never changes after definition.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from enumlab.domain.errors import (
    NonExhaustiveMatch,
    ShapeMismatch,
    UnionDefinitionError,
    UnknownVariant,
)
from enumlab.domain.fields import Shape, TypeShape, UnionShape

WILDCARD = "_"

UNION_REGISTRY: dict[str, UnionType] = {}


def as_shape(obj: Any) -> Shape:
    """Coerce a type, union or shape into a :class:`Shape`."""
    if isinstance(obj, Shape):
        return obj
    if isinstance(obj, UnionType):
        return UnionShape(obj)
    if isinstance(obj, type):
        return TypeShape(obj)
    msg = f"Cannot use {obj!r} as a field shape"
    raise UnionDefinitionError(msg)


def register_union(union: UnionType) -> UnionType:
    """Make *union* resolvable by name (for :class:`~enumlab.domain.fields.Ref`)."""
    existing = UNION_REGISTRY.get(union.name)
    if existing is not None and existing is not union:
        msg = f"A different union is already registered as {union.name!r}"
        raise UnionDefinitionError(msg)
    UNION_REGISTRY[union.name] = union
    return union


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Field:
    """One payload slot. ``name`` is None for an unlabelled slot."""

    name: str | None
    shape: Shape

    def __post_init__(self) -> None:
        if self.name is not None and not self.name.isidentifier():
            raise UnionDefinitionError(f"Invalid field label: {self.name!r}")
        object.__setattr__(self, "shape", as_shape(self.shape))

    def describe(self) -> str:
        shape = self.shape.describe()
        return f"{self.name}: {shape}" if self.name else shape


def _as_field(entry: Any) -> Field:
    if isinstance(entry, Field):
        return entry
    if isinstance(entry, tuple) and len(entry) == 2 and isinstance(entry[0], str):
        return Field(entry[0], entry[1])
    return Field(None, entry)


class Variant:
    """A named alternative and the shape of its payload.

    Args:
        name: Variant name, unique within its union.
        *fields: :class:`Field` objects, ``(label, shape)`` pairs, or bare
            shapes for unlabelled slots.
        invariant: Optional predicate called with the payload as
            positional arguments; a False result rejects the value.
        doc: One-line description shown by ``enumlab describe``.
    """

    def __init__(
        self,
        name: str,
        *fields: Any,
        invariant: Callable[..., bool] | None = None,
        doc: str | None = None,
    ) -> None:
        if not name.isidentifier():
            raise UnionDefinitionError(f"Invalid variant name: {name!r}")
        self.name = name
        self.fields: tuple[Field, ...] = tuple(_as_field(f) for f in fields)
        self.invariant = invariant
        self.doc = doc

        labels = [f.name for f in self.fields if f.name is not None]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            msg = f"Variant {name} repeats field labels: {duplicates}"
            raise UnionDefinitionError(msg)

    @property
    def arity(self) -> int:
        return len(self.fields)

    def labels(self) -> tuple[str | None, ...]:
        return tuple(f.name for f in self.fields)

    def describe(self) -> str:
        if not self.fields:
            return self.name
        return f"{self.name}({', '.join(f.describe() for f in self.fields)})"

    def specialize(self, bindings: Mapping[str, Shape]) -> Variant:
        fields = [Field(f.name, f.shape.specialize(bindings)) for f in self.fields]
        return Variant(self.name, *fields, invariant=self.invariant, doc=self.doc)

    def __repr__(self) -> str:
        return f"<variant {self.describe()}>"


# Attribute names a variant may not shadow.
_RESERVED = frozenset(
    {
        "accepts",
        "args",
        "construct",
        "describe",
        "doc",
        "is_recursive",
        "matcher",
        "name",
        "origin",
        "params",
        "specialize",
        "variant",
        "variant_names",
        "variants",
    }
)


class UnionType:
    """A closed union of named variants.

    Variant constructors are reachable as attributes. A variant without
    fields is exposed as its (single, shared) value rather than as a
    constructor, so ``Account.Empty`` is already a value while
    ``Account.Funds(remaining=10)`` builds one.

    Generic unions declare ``params`` and are specialized with
    subscription: ``Maybe[int]``. Specializations are cached by the
    structure of their arguments, so ``Maybe[int] is Maybe[int]`` and
    ``Maybe[SequenceOf(int)] is Maybe[SequenceOf(int)]``.
    """

    def __init__(
        self,
        name: str,
        *variants: Variant,
        params: tuple[str, ...] = (),
        doc: str | None = None,
    ) -> None:
        if not variants:
            raise UnionDefinitionError(f"Union {name} must declare at least one variant")
        self.name = name
        self.params = tuple(params)
        self.doc = doc
        self.origin: UnionType = self
        self.args: tuple[Shape, ...] = ()
        self._variants: dict[str, Variant] = {}
        self._singletons: dict[str, TaggedValue] = {}
        self._specializations: dict[tuple[Shape, ...], UnionType] = {}

        for v in variants:
            if v.name in self._variants:
                raise UnionDefinitionError(f"Union {name} repeats variant {v.name}")
            if v.name in _RESERVED or v.name == WILDCARD:
                raise UnionDefinitionError(f"Variant name {v.name!r} is reserved")
            self._variants[v.name] = v

        declared = set(self.params)
        for v in variants:
            for f in v.fields:
                unknown = f.shape.type_params() - declared
                if unknown:
                    msg = f"{name}.{v.name} uses undeclared type parameters: {sorted(unknown)}"
                    raise UnionDefinitionError(msg)

    # --- Introspection ---

    @property
    def variants(self) -> tuple[Variant, ...]:
        return tuple(self._variants.values())

    def variant_names(self) -> tuple[str, ...]:
        return tuple(self._variants)

    def variant(self, tag: str) -> Variant:
        try:
            return self._variants[tag]
        except KeyError:
            raise UnknownVariant(str(self), tag) from None

    def accepts(self, value: Any) -> bool:
        """True if *value* is a member of this union (or a compatible specialization)."""
        if not isinstance(value, TaggedValue):
            return False
        other = value.union
        if other.origin is not self.origin:
            return False
        return not self.args or not other.args or other.args == self.args

    def is_recursive(self) -> bool:
        """True if some variant's payload transitively mentions this union."""
        seen: set[int] = set()
        pending = [self]
        while pending:
            current = pending.pop()
            for v in current.variants:
                for f in v.fields:
                    for ref in f.shape.references(current):
                        if ref.origin is self.origin:
                            return True
                        if id(ref) not in seen:
                            seen.add(id(ref))
                            pending.append(ref)
        return False

    def describe(self) -> list[str]:
        return [v.describe() for v in self.variants]

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}[{', '.join(a.describe() for a in self.args)}]"

    def __repr__(self) -> str:
        return f"<union {self}>"

    def __iter__(self) -> Iterator[Variant]:
        return iter(self._variants.values())

    def __len__(self) -> int:
        return len(self._variants)

    # --- Generic parameterization ---

    def __getitem__(self, args: Any) -> UnionType:
        if not isinstance(args, tuple):
            args = (args,)
        return self.specialize(*args)

    def specialize(self, *args: Any) -> UnionType:
        if not self.params:
            raise UnionDefinitionError(f"Union {self} is not generic")
        if len(args) != len(self.params):
            msg = f"{self.name} takes {len(self.params)} type argument(s), got {len(args)}"
            raise UnionDefinitionError(msg)
        shapes = tuple(as_shape(a) for a in args)
        cached = self._specializations.get(shapes)
        if cached is not None:
            return cached

        bindings = dict(zip(self.params, shapes, strict=True))
        special = UnionType(
            self.name,
            *(v.specialize(bindings) for v in self.variants),
            params=tuple(sorted(set().union(*(s.type_params() for s in shapes)))),
            doc=self.doc,
        )
        special.origin = self
        special.args = shapes
        self._specializations[shapes] = special
        return special

    # --- Construction ---

    def __getattr__(self, tag: str) -> Any:
        variants = self.__dict__.get("_variants")
        if variants is None or tag not in variants:
            raise AttributeError(tag)
        if not variants[tag].fields:
            return self.construct(tag)

        def constructor(*args: Any, **kwargs: Any) -> TaggedValue:
            return self.construct(tag, *args, **kwargs)

        constructor.__name__ = tag
        constructor.__qualname__ = f"{self.name}.{tag}"
        return constructor

    def construct(self, tag: str, *args: Any, **kwargs: Any) -> TaggedValue:
        """Build a value of variant *tag*, checking the payload shape.

        Raises:
            UnknownVariant: *tag* is not a variant of this union.
            ShapeMismatch: arity, labels, field types or the variant
                invariant do not match.
        """
        variant = self.variant(tag)
        if not variant.fields and not args and not kwargs:
            cached = self._singletons.get(tag)
            if cached is None:
                cached = self._singletons[tag] = TaggedValue(self, tag, ())
            return cached

        payload = self._bind(variant, args, kwargs)
        for index, (f, value) in enumerate(zip(variant.fields, payload, strict=True)):
            if not f.shape.check(value, self):
                slot = f.name or f"#{index}"
                reason = f"field {slot} expects {f.shape.describe()}, got {type(value).__name__}"
                raise ShapeMismatch(str(self), tag, reason)
        frozen = tuple(f.shape.freeze(v) for f, v in zip(variant.fields, payload, strict=True))
        if variant.invariant is not None and not variant.invariant(*frozen):
            raise ShapeMismatch(str(self), tag, f"invariant violated by {frozen!r}")
        return TaggedValue(self, tag, frozen)

    def _bind(self, variant: Variant, args: tuple[Any, ...], kwargs: dict[str, Any]) -> list[Any]:
        tag = variant.name
        if len(args) > variant.arity:
            reason = f"expected at most {variant.arity} field(s), got {len(args)}"
            raise ShapeMismatch(str(self), tag, reason)
        slots: list[Any] = list(args) + [_MISSING] * (variant.arity - len(args))
        labels = variant.labels()
        for key, value in kwargs.items():
            if key not in labels:
                raise ShapeMismatch(str(self), tag, f"unexpected field {key!r}")
            index = labels.index(key)
            if slots[index] is not _MISSING:
                raise ShapeMismatch(str(self), tag, f"field {key!r} given twice")
            slots[index] = value
        missing = [f.name or f"#{i}" for i, f in enumerate(variant.fields) if slots[i] is _MISSING]
        if missing:
            raise ShapeMismatch(str(self), tag, f"missing field(s): {', '.join(missing)}")
        return slots

    # --- Matching ---

    def matcher(self, handlers: Mapping[str, Any] | None = None, **more: Any) -> Matcher:
        """Compile an exhaustive match over this union.

        Exhaustiveness is checked here, once, so a missing handler is
        reported where the match is written rather than when some rare
        variant finally shows up.
        """
        table = dict(handlers or {})
        table.update(more)
        for key in table:
            if key != WILDCARD and key not in self._variants:
                raise UnknownVariant(str(self), key)
        if WILDCARD not in table:
            missing = [tag for tag in self._variants if tag not in table]
            if missing:
                raise NonExhaustiveMatch(str(self), missing)
        return Matcher(self, table)


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


_MISSING = _Missing()


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


# Attributes of the value itself, never payload fields. __getattr__ only
# sees them when a slot is still unset.
_OWN_ATTRIBUTES = frozenset({"union", "tag", "payload", "variant", "fields"})


def _hashable(value: Any) -> Any:
    if isinstance(value, Mapping):
        return frozenset((k, _hashable(v)) for k, v in value.items())
    if isinstance(value, tuple):
        return tuple(_hashable(v) for v in value)
    return value


class TaggedValue:
    """An immutable value: exactly one variant of one union, plus its payload.

    Supports structural pattern matching::

        match value:
            case TaggedValue(tag="Funds", payload=(remaining,)):
                ...
    """

    __slots__ = ("union", "tag", "payload")
    __match_args__ = ("tag", "payload")

    union: UnionType
    tag: str
    payload: tuple[Any, ...]

    def __init__(self, union: UnionType, tag: str, payload: tuple[Any, ...]) -> None:
        object.__setattr__(self, "union", union)
        object.__setattr__(self, "tag", tag)
        object.__setattr__(self, "payload", payload)

    @property
    def variant(self) -> Variant:
        return self.union.variant(self.tag)

    @property
    def fields(self) -> dict[str, Any]:
        """Labelled payload fields by name (unlabelled slots are omitted)."""
        return {
            f.name: value
            for f, value in zip(self.variant.fields, self.payload, strict=True)
            if f.name is not None
        }

    def is_variant(self, tag: str) -> bool:
        if tag not in self.union.variant_names():
            raise UnknownVariant(str(self.union), tag)
        return self.tag == tag

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name in _OWN_ATTRIBUTES:
            raise AttributeError(name)
        fields = self.fields
        if name in fields:
            return fields[name]
        msg = f"{self.union}.{self.tag} has no field {name!r}"
        raise AttributeError(msg)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> TaggedValue:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> TaggedValue:
        return self

    def __eq__(self, other: object) -> bool:
        """Same variant and payload, in unions that accept each other's values."""
        if not isinstance(other, TaggedValue):
            return NotImplemented
        return (
            self.tag == other.tag
            and self.union.accepts(other)
            and self.payload == other.payload
        )

    def __hash__(self) -> int:
        return hash((id(self.union.origin), self.tag, _hashable(self.payload)))

    def __repr__(self) -> str:
        head = f"{self.union.name}.{self.tag}"
        if not self.payload:
            return head
        parts = []
        for f, value in zip(self.variant.fields, self.payload, strict=True):
            parts.append(f"{f.name}={value!r}" if f.name else repr(value))
        return f"{head}({', '.join(parts)})"


class Matcher:
    """An exhaustiveness-checked dispatch table over one union.

    Each handler is called with the matched variant's payload as
    positional arguments; a non-callable handler is returned as-is.
    The ``"_"`` wildcard handler receives the whole value.
    """

    def __init__(self, union: UnionType, handlers: dict[str, Any]) -> None:
        self.union = union
        self._handlers = handlers

    def __call__(self, value: TaggedValue) -> Any:
        if not self.union.accepts(value):
            tag = value.tag if isinstance(value, TaggedValue) else type(value).__name__
            raise ShapeMismatch(str(self.union), tag, f"cannot match {value!r}")
        if value.tag in self._handlers:
            handler = self._handlers[value.tag]
            return handler(*value.payload) if callable(handler) else handler
        handler = self._handlers[WILDCARD]
        return handler(value) if callable(handler) else handler


def match(value: TaggedValue, handlers: Mapping[str, Any]) -> Any:
    """Dispatch *value* to the handler for its variant.

    Raises:
        NonExhaustiveMatch: *handlers* misses a variant and has no ``"_"``.
        UnknownVariant: *handlers* names a variant the union lacks.
    """
    if not isinstance(value, TaggedValue):
        msg = f"match() expects a TaggedValue, got {type(value).__name__}"
        raise TypeError(msg)
    return value.union.matcher(handlers)(value)


def destructure(value: TaggedValue) -> tuple[str, tuple[Any, ...]]:
    """Return the ``(variant name, payload)`` pair of *value*."""
    return value.tag, value.payload
