"""Recursive unions: a file tree and a binary search tree.

Both hold values of their own union in the payload. Python payloads are
references, so the self-referential variants need no extra boxing; the
``SELF`` shape only has to make sure the children belong to the same
union.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator
from typing import Any

from enumlab.domain.errors import ShapeMismatch
from enumlab.domain.fields import SELF, SequenceOf, TypeParam
from enumlab.domain.union import Field, TaggedValue, UnionType, Variant, register_union

FileNode = register_union(
    UnionType(
        "FileNode",
        Variant("File", Field("name", str)),
        Variant("Folder", Field("name", str), Field("files", SequenceOf(SELF))),
        doc="A file, or a folder holding more file nodes.",
    )
)

Tree = register_union(
    UnionType(
        "Tree",
        Variant("Empty"),
        Variant("Node", SELF, TypeParam("Element"), SELF),
        params=("Element",),
        doc="An unbalanced binary search tree.",
    )
)


# --- FileNode ---


def walk(node: TaggedValue, prefix: str = "") -> Iterator[str]:
    """Yield the path of every node, folders with a trailing slash."""
    match node:
        case TaggedValue(tag="File", payload=(name,)):
            yield f"{prefix}{name}"
        case TaggedValue(tag="Folder", payload=(name, files)):
            here = f"{prefix}{name}/"
            yield here
            for child in files:
                yield from walk(child, here)
        case _:
            raise ShapeMismatch("FileNode", getattr(node, "tag", "?"), f"cannot walk {node!r}")


def count_files(node: TaggedValue) -> int:
    return sum(1 for path in walk(node) if not path.endswith("/"))


def render_tree(node: TaggedValue, indent: int = 0) -> list[str]:
    """Indented outline, two spaces per level."""
    pad = "  " * indent
    if node.is_variant("File"):
        return [f"{pad}{node.name}"]
    lines = [f"{pad}{node.name}/"]
    for child in node.files:
        lines.extend(render_tree(child, indent + 1))
    return lines


# --- Tree ---


def insert(tree: TaggedValue, element: Any) -> TaggedValue:
    """Return a tree that also holds *element*. Duplicates are ignored.

    Walks down without recursing, then rebuilds the path back up to the
    root; subtrees off the path are shared with *tree*.
    """
    union = tree.union
    path: list[tuple[TaggedValue, bool]] = []
    current = tree
    while current.is_variant("Node"):
        left, value, right = current.payload
        if element < value:
            path.append((current, True))
            current = left
        elif value < element:
            path.append((current, False))
            current = right
        else:
            return tree

    rebuilt = union.Node(union.Empty, element, union.Empty)
    while path:
        node, went_left = path.pop()
        left, value, right = node.payload
        if went_left:
            rebuilt = union.Node(rebuilt, value, right)
        else:
            rebuilt = union.Node(left, value, rebuilt)
    return rebuilt


def contains(tree: TaggedValue, element: Any) -> bool:
    while tree.is_variant("Node"):
        left, value, right = tree.payload
        if element < value:
            tree = left
        elif value < element:
            tree = right
        else:
            return True
    return False


def in_order(tree: TaggedValue) -> Iterator[Any]:
    pending: list[TaggedValue] = []
    current = tree
    while True:
        while current.is_variant("Node"):
            pending.append(current)
            current = current.payload[0]
        if not pending:
            return
        _, value, current = pending.pop().payload
        yield value


def size(tree: TaggedValue) -> int:
    return sum(1 for _ in in_order(tree))


def depth(tree: TaggedValue) -> int:
    deepest = 0
    pending = [(tree, 0)]
    while pending:
        node, level = pending.pop()
        if node.is_variant("Node"):
            left, _, right = node.payload
            pending.append((left, level + 1))
            pending.append((right, level + 1))
        else:
            deepest = max(deepest, level)
    return deepest


def from_iterable(elements: Iterable[Any], union: UnionType = Tree) -> TaggedValue:
    """Build the tree that inserting *elements* one by one would give.

    A new element always hangs off one of its in-order neighbours: the
    right slot of its predecessor if that is free, else the left slot of
    its successor. Finding them by bisection keeps sorted input from
    costing a full walk per element; nodes are frozen once, leaves first.
    """
    ordered: list[Any] = []
    ordered_ids: list[int] = []
    values: list[Any] = []
    leaves: list[TaggedValue] = []
    left: list[int] = []
    right: list[int] = []

    for element in elements:
        at = bisect_left(ordered, element)
        if at < len(ordered) and not element < ordered[at]:
            continue
        node = len(values)
        leaves.append(union.Node(union.Empty, element, union.Empty))
        values.append(element)
        left.append(-1)
        right.append(-1)
        if at > 0 and right[ordered_ids[at - 1]] < 0:
            right[ordered_ids[at - 1]] = node
        elif at < len(ordered):
            left[ordered_ids[at]] = node
        ordered.insert(at, element)
        ordered_ids.insert(at, node)

    # children are always added after their parent
    built: list[TaggedValue] = [union.Empty] * len(values)
    for node in reversed(range(len(values))):
        lo, hi = left[node], right[node]
        if lo < 0 and hi < 0:
            built[node] = leaves[node]
        else:
            built[node] = union.Node(
                built[lo] if lo >= 0 else union.Empty,
                values[node],
                built[hi] if hi >= 0 else union.Empty,
            )
    return built[0] if built else union.Empty
