"""Payload field shapes for tagged union variants.

A shape answers three questions about a payload slot: does a value fit,
how is it written down, and which unions or type parameters does it
mention. Shapes are immutable and compare by structure, so equal shapes
specialize a generic union to the same result. Specialization returns
new shapes with every :class:`TypeParam` replaced by its binding.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from enumlab.domain.errors import UnionDefinitionError

if TYPE_CHECKING:
    from enumlab.domain.union import UnionType


class Shape(ABC):
    """Abstract base for everything that may appear in a payload slot."""

    @abstractmethod
    def check(self, value: Any, owner: UnionType) -> bool:
        """Return True if *value* fits this shape inside *owner*."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Human-readable rendering, e.g. ``[FileNode]`` or ``int?``."""
        ...

    def freeze(self, value: Any) -> Any:
        """Return an immutable form of an already-checked value."""
        return value

    def specialize(self, bindings: Mapping[str, Shape]) -> Shape:
        return self

    def type_params(self) -> set[str]:
        return set()

    def references(self, owner: UnionType) -> Iterator[UnionType]:
        """Yield every union this shape directly mentions."""
        return iter(())

    def _key(self) -> tuple[Any, ...]:
        """What identifies this shape. Shapes of one class with equal keys are equal."""
        return ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return type(other) is type(self) and other._key() == self._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._key()))

    def __repr__(self) -> str:
        return f"<shape {self.describe()}>"


class TypeShape(Shape):
    """A concrete Python type, checked with ``isinstance``.

    ``bool`` is a subclass of ``int`` in Python; a slot declared ``int``
    still refuses ``True`` and ``False``.
    """

    def __init__(self, tp: type) -> None:
        self.tp = tp

    def check(self, value: Any, owner: UnionType) -> bool:
        if isinstance(value, bool) and self.tp is not bool:
            return self.tp is object
        return isinstance(value, self.tp)

    def describe(self) -> str:
        return self.tp.__name__

    def _key(self) -> tuple[Any, ...]:
        return (self.tp,)


class AnyShape(Shape):
    def check(self, value: Any, owner: UnionType) -> bool:
        return True

    def describe(self) -> str:
        return "any"


ANY = AnyShape()


class TypeParam(Shape):
    """A type parameter of a generic union, resolved at the use site.

    Until the union is specialized the parameter accepts any value.
    """

    def __init__(self, name: str) -> None:
        if not name.isidentifier():
            raise UnionDefinitionError(f"Invalid type parameter name: {name!r}")
        self.name = name

    def check(self, value: Any, owner: UnionType) -> bool:
        return True

    def describe(self) -> str:
        return self.name

    def specialize(self, bindings: Mapping[str, Shape]) -> Shape:
        return bindings.get(self.name, self)

    def type_params(self) -> set[str]:
        return {self.name}

    def _key(self) -> tuple[Any, ...]:
        return (self.name,)


class SelfShape(Shape):
    """The union currently being defined."""

    def check(self, value: Any, owner: UnionType) -> bool:
        return owner.accepts(value)

    def describe(self) -> str:
        return "Self"

    def references(self, owner: UnionType) -> Iterator[UnionType]:
        yield owner


SELF = SelfShape()


class UnionShape(Shape):
    """Another, already defined union."""

    def __init__(self, union: UnionType) -> None:
        self.union = union

    def check(self, value: Any, owner: UnionType) -> bool:
        return self.union.accepts(value)

    def describe(self) -> str:
        return str(self.union)

    def references(self, owner: UnionType) -> Iterator[UnionType]:
        yield self.union

    def _key(self) -> tuple[Any, ...]:
        return (self.union,)


class Ref(Shape):
    """A union named but not yet defined, looked up in the union registry.

    Lets two unions refer to each other regardless of definition order.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def resolve(self) -> UnionType:
        from enumlab.domain.union import UNION_REGISTRY

        try:
            return UNION_REGISTRY[self.name]
        except KeyError:
            msg = f"Unresolved union reference: {self.name!r}"
            raise UnionDefinitionError(msg) from None

    def check(self, value: Any, owner: UnionType) -> bool:
        return self.resolve().accepts(value)

    def describe(self) -> str:
        return self.name

    def references(self, owner: UnionType) -> Iterator[UnionType]:
        yield self.resolve()

    def _key(self) -> tuple[Any, ...]:
        return (self.name,)


class SequenceOf(Shape):
    """A list or tuple whose items all fit *item*. Stored as a tuple."""

    def __init__(self, item: Any) -> None:
        from enumlab.domain.union import as_shape

        self.item = as_shape(item)

    def check(self, value: Any, owner: UnionType) -> bool:
        if not isinstance(value, (list, tuple)):
            return False
        return all(self.item.check(v, owner) for v in value)

    def freeze(self, value: Any) -> Any:
        return tuple(self.item.freeze(v) for v in value)

    def describe(self) -> str:
        return f"[{self.item.describe()}]"

    def specialize(self, bindings: Mapping[str, Shape]) -> Shape:
        return SequenceOf(self.item.specialize(bindings))

    def type_params(self) -> set[str]:
        return self.item.type_params()

    def references(self, owner: UnionType) -> Iterator[UnionType]:
        return self.item.references(owner)

    def _key(self) -> tuple[Any, ...]:
        return (self.item,)


class OptionalOf(Shape):
    """Either ``None`` or a value fitting *inner*."""

    def __init__(self, inner: Any) -> None:
        from enumlab.domain.union import as_shape

        self.inner = as_shape(inner)

    def check(self, value: Any, owner: UnionType) -> bool:
        return value is None or self.inner.check(value, owner)

    def freeze(self, value: Any) -> Any:
        return None if value is None else self.inner.freeze(value)

    def describe(self) -> str:
        return f"{self.inner.describe()}?"

    def specialize(self, bindings: Mapping[str, Shape]) -> Shape:
        return OptionalOf(self.inner.specialize(bindings))

    def type_params(self) -> set[str]:
        return self.inner.type_params()

    def references(self, owner: UnionType) -> Iterator[UnionType]:
        return self.inner.references(owner)

    def _key(self) -> tuple[Any, ...]:
        return (self.inner,)


class MappingOf(Shape):
    """A mapping with keys fitting *key* and values fitting *value*.

    Stored as a read-only view over a private copy.
    """

    def __init__(self, key: Any, value: Any) -> None:
        from enumlab.domain.union import as_shape

        self.key = as_shape(key)
        self.value = as_shape(value)

    def check(self, value: Any, owner: UnionType) -> bool:
        if not isinstance(value, Mapping):
            return False
        return all(
            self.key.check(k, owner) and self.value.check(v, owner) for k, v in value.items()
        )

    def freeze(self, value: Any) -> Any:
        return MappingProxyType({k: self.value.freeze(v) for k, v in value.items()})

    def describe(self) -> str:
        return f"{{{self.key.describe()}: {self.value.describe()}}}"

    def specialize(self, bindings: Mapping[str, Shape]) -> Shape:
        return MappingOf(self.key.specialize(bindings), self.value.specialize(bindings))

    def type_params(self) -> set[str]:
        return self.key.type_params() | self.value.type_params()

    def references(self, owner: UnionType) -> Iterator[UnionType]:
        yield from self.key.references(owner)
        yield from self.value.references(owner)

    def _key(self) -> tuple[Any, ...]:
        return (self.key, self.value)
