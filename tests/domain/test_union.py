"""Tests for the tagged union engine: construction, matching, destructuring."""

from __future__ import annotations

import copy

import pytest

from enumlab.domain.errors import (
    NonExhaustiveMatch,
    ShapeMismatch,
    UnionContractError,
    UnionDefinitionError,
    UnknownVariant,
)
from enumlab.domain.fields import SELF, MappingOf, Ref, SequenceOf, TypeParam
from enumlab.domain.union import (
    UNION_REGISTRY,
    Field,
    TaggedValue,
    UnionType,
    Variant,
    destructure,
    match,
)

Shape = UnionType(
    "Shape",
    Variant("Circle", Field("radius", float)),
    Variant("Square", Field("side", float)),
    Variant("Point"),
)

Box = UnionType(
    "Box",
    Variant("Some", TypeParam("T")),
    Variant("Nothing"),
    params=("T",),
)


class TestConstruct:
    def test_keyword_payload(self) -> None:
        c = Shape.Circle(radius=2.0)
        assert c.tag == "Circle"
        assert c.payload == (2.0,)
        assert c.radius == 2.0

    def test_positional_payload(self) -> None:
        assert Shape.Square(3.0) == Shape.Square(side=3.0)

    def test_construct_by_name(self) -> None:
        assert Shape.construct("Circle", 1.5) == Shape.Circle(radius=1.5)

    def test_nullary_variant_is_a_shared_value(self) -> None:
        assert isinstance(Shape.Point, TaggedValue)
        assert Shape.Point is Shape.Point
        assert Shape.Point.payload == ()

    def test_repr(self) -> None:
        assert repr(Shape.Circle(radius=1.0)) == "Shape.Circle(radius=1.0)"
        assert repr(Shape.Point) == "Shape.Point"

    def test_unknown_variant(self) -> None:
        with pytest.raises(UnknownVariant, match="Triangle"):
            Shape.construct("Triangle", 1.0)

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError):
            Shape.Triangle  # noqa: B018


class TestShapeMismatch:
    def test_wrong_field_type(self) -> None:
        with pytest.raises(ShapeMismatch) as exc_info:
            Shape.Circle(radius="big")
        assert exc_info.value.union == "Shape"
        assert exc_info.value.tag == "Circle"
        assert "field radius expects float, got str" in str(exc_info.value)

    def test_bool_is_not_an_int(self) -> None:
        Counter = UnionType("Counter", Variant("At", Field("n", int)))
        with pytest.raises(ShapeMismatch):
            Counter.At(n=True)

    def test_missing_field(self) -> None:
        with pytest.raises(ShapeMismatch, match="missing field"):
            Shape.Circle()

    def test_too_many_fields(self) -> None:
        with pytest.raises(ShapeMismatch, match="at most 1"):
            Shape.Circle(1.0, 2.0)

    def test_unexpected_label(self) -> None:
        with pytest.raises(ShapeMismatch, match="unexpected field 'diameter'"):
            Shape.Circle(diameter=1.0)

    def test_field_given_twice(self) -> None:
        with pytest.raises(ShapeMismatch, match="given twice"):
            Shape.Circle(1.0, radius=2.0)

    def test_payload_on_nullary_variant(self) -> None:
        with pytest.raises(ShapeMismatch):
            Shape.construct("Point", 1)

    def test_invariant_rejects_value(self) -> None:
        Positive = UnionType(
            "Positive",
            Variant("Of", Field("n", int), invariant=lambda n: n > 0),
        )
        assert Positive.Of(n=1).n == 1
        with pytest.raises(ShapeMismatch, match="invariant"):
            Positive.Of(n=0)

    def test_invariant_gets_payload_in_field_order(self) -> None:
        Range = UnionType("Range", Variant("Of", int, int, invariant=lambda low, high: low <= high))
        assert Range.Of(1, 2).payload == (1, 2)
        with pytest.raises(ShapeMismatch, match="invariant"):
            Range.Of(3, 1)

    def test_is_a_contract_error(self) -> None:
        with pytest.raises(UnionContractError):
            Shape.Square(side=None)


class TestImmutability:
    def test_cannot_set_attribute(self) -> None:
        c = Shape.Circle(radius=1.0)
        with pytest.raises(AttributeError):
            c.radius = 2.0  # type: ignore[misc]
        with pytest.raises(AttributeError):
            c.tag = "Square"  # type: ignore[misc]

    def test_cannot_delete_attribute(self) -> None:
        with pytest.raises(AttributeError):
            del Shape.Circle(radius=1.0).payload

    def test_sequence_payload_is_frozen(self) -> None:
        Batch = UnionType("Batch", Variant("Of", Field("items", SequenceOf(int))))
        source = [1, 2, 3]
        batch = Batch.Of(items=source)
        source.append(4)
        assert batch.items == (1, 2, 3)

    def test_equal_values_hash_equal(self) -> None:
        a = Shape.Circle(radius=1.0)
        b = Shape.Circle(radius=1.0)
        assert a == b
        assert hash(a) == hash(b)
        assert a != Shape.Square(side=1.0)
        assert len({a, b, Shape.Point}) == 2

    def test_mapping_payload_hashable(self) -> None:
        Scores = UnionType("Scores", Variant("Table", Field("by_name", MappingOf(str, int))))
        a = Scores.Table(by_name={"ada": 3, "bob": 1})
        b = Scores.Table(by_name={"bob": 1, "ada": 3})
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_copy_returns_same_value(self) -> None:
        value = Shape.Circle(radius=1.0)
        assert copy.copy(value) is value
        assert copy.deepcopy(value) is value

    def test_deepcopy_inside_container(self) -> None:
        history = {"shapes": [Shape.Square(side=2.0), Shape.Point]}
        cloned = copy.deepcopy(history)
        assert cloned == history
        assert cloned["shapes"] is not history["shapes"]
        assert cloned["shapes"][0] is history["shapes"][0]

    def test_unset_slots_raise_attribute_error(self) -> None:
        blank = TaggedValue.__new__(TaggedValue)
        with pytest.raises(AttributeError):
            blank.tag  # noqa: B018
        with pytest.raises(AttributeError):
            blank.radius  # noqa: B018


class TestDefinition:
    def test_empty_union(self) -> None:
        with pytest.raises(UnionDefinitionError):
            UnionType("Nothing")

    def test_duplicate_variant(self) -> None:
        with pytest.raises(UnionDefinitionError, match="repeats variant"):
            UnionType("Dup", Variant("A"), Variant("A"))

    def test_reserved_variant_name(self) -> None:
        with pytest.raises(UnionDefinitionError, match="reserved"):
            UnionType("Bad", Variant("matcher"))

    def test_wildcard_variant_name(self) -> None:
        with pytest.raises(UnionDefinitionError, match="reserved"):
            UnionType("Bad", Variant("_"))

    def test_duplicate_labels(self) -> None:
        with pytest.raises(UnionDefinitionError, match="repeats field labels"):
            Variant("Pair", Field("x", int), Field("x", int))

    def test_invalid_label(self) -> None:
        with pytest.raises(UnionDefinitionError):
            Field("not valid", int)

    def test_invalid_shape(self) -> None:
        with pytest.raises(UnionDefinitionError):
            Field("x", 42)

    def test_undeclared_type_parameter(self) -> None:
        with pytest.raises(UnionDefinitionError, match="undeclared"):
            UnionType("Loose", Variant("Some", TypeParam("T")))

    def test_describe(self) -> None:
        assert Shape.describe() == ["Circle(radius: float)", "Square(side: float)", "Point"]
        assert Shape.variant_names() == ("Circle", "Square", "Point")
        assert len(Shape) == 3


class TestMatch:
    def test_exhaustive_match(self) -> None:
        area = Shape.matcher(
            Circle=lambda r: 3.0 * r * r,
            Square=lambda s: s * s,
            Point=0.0,
        )
        assert area(Shape.Square(side=2.0)) == 4.0
        assert area(Shape.Circle(radius=1.0)) == 3.0
        assert area(Shape.Point) == 0.0

    def test_missing_handler_rejected_before_any_call(self) -> None:
        calls: list[str] = []
        with pytest.raises(NonExhaustiveMatch) as exc_info:
            Shape.matcher(Circle=lambda r: calls.append("circle"), Point=None)
        assert exc_info.value.missing == ("Square",)
        assert calls == []

    def test_match_function_checks_exhaustiveness(self) -> None:
        with pytest.raises(NonExhaustiveMatch):
            match(Shape.Point, {"Point": 1})

    def test_unknown_handler_key(self) -> None:
        with pytest.raises(UnknownVariant, match="Hexagon"):
            Shape.matcher(Circle=1, Square=2, Point=3, Hexagon=4)

    def test_wildcard_receives_whole_value(self) -> None:
        seen: list[TaggedValue] = []
        m = Shape.matcher(Point="point", _=lambda v: seen.append(v) or v.tag)
        assert m(Shape.Point) == "point"
        assert m(Shape.Square(side=1.0)) == "Square"
        assert seen == [Shape.Square(side=1.0)]

    def test_match_dispatches_once(self) -> None:
        calls: list[str] = []
        result = match(
            Shape.Circle(radius=2.0),
            {
                "Circle": lambda r: calls.append("circle") or r,
                "Square": lambda s: calls.append("square") or s,
                "Point": lambda: calls.append("point"),
            },
        )
        assert result == 2.0
        assert calls == ["circle"]

    def test_foreign_value_rejected(self) -> None:
        m = Box.matcher(Some=lambda v: v, Nothing=None)
        with pytest.raises(ShapeMismatch, match="cannot match"):
            m(Shape.Point)

    def test_match_requires_tagged_value(self) -> None:
        with pytest.raises(TypeError):
            match(42, {"_": 0})  # type: ignore[arg-type]

    def test_structural_pattern_matching(self) -> None:
        def area(value: TaggedValue) -> float:
            match value:
                case TaggedValue(tag="Circle", payload=(r,)):
                    return 3.0 * r * r
                case TaggedValue(tag="Square", payload=(s,)):
                    return s * s
                case _:
                    return 0.0

        assert area(Shape.Square(side=3.0)) == 9.0
        assert area(Shape.Point) == 0.0


class TestDestructure:
    def test_returns_tag_and_payload(self) -> None:
        assert destructure(Shape.Circle(radius=1.0)) == ("Circle", (1.0,))
        assert destructure(Shape.Point) == ("Point", ())

    def test_fields_by_label(self) -> None:
        assert Shape.Square(side=2.0).fields == {"side": 2.0}

    def test_missing_field_attribute(self) -> None:
        with pytest.raises(AttributeError, match="no field 'side'"):
            Shape.Circle(radius=1.0).side  # noqa: B018

    def test_is_variant(self) -> None:
        assert Shape.Point.is_variant("Point")
        assert not Shape.Point.is_variant("Circle")
        with pytest.raises(UnknownVariant):
            Shape.Point.is_variant("Hexagon")


class TestNesting:
    def test_union_field(self) -> None:
        Drawing = UnionType("Drawing", Variant("Single", Field("shape", Shape)))
        d = Drawing.Single(shape=Shape.Circle(radius=1.0))
        assert d.shape.radius == 1.0

    def test_union_field_rejects_other_union(self) -> None:
        Drawing = UnionType("Drawing", Variant("Single", Field("shape", Shape)))
        with pytest.raises(ShapeMismatch, match="expects Shape"):
            Drawing.Single(shape=Box.Nothing)

    def test_self_reference(self) -> None:
        Chain = UnionType(
            "Chain",
            Variant("End"),
            Variant("Link", Field("value", int), Field("next", SELF)),
        )
        chain = Chain.Link(1, Chain.Link(2, Chain.End))
        assert chain.next.value == 2
        assert Chain.is_recursive()
        assert not Shape.is_recursive()
        with pytest.raises(ShapeMismatch):
            Chain.Link(1, Shape.Point)

    def test_forward_reference_through_registry(self, monkeypatch: pytest.MonkeyPatch) -> None:
        Expr = UnionType(
            "ExprUnderTest",
            Variant("Num", Field("value", int)),
            Variant("Block", Field("body", SequenceOf(Ref("StmtUnderTest")))),
        )
        Stmt = UnionType(
            "StmtUnderTest",
            Variant("Eval", Field("expr", Ref("ExprUnderTest"))),
        )
        monkeypatch.setitem(UNION_REGISTRY, "ExprUnderTest", Expr)
        monkeypatch.setitem(UNION_REGISTRY, "StmtUnderTest", Stmt)

        block = Expr.Block(body=[Stmt.Eval(expr=Expr.Num(value=1))])
        assert block.body[0].expr.value == 1
        assert Expr.is_recursive()

    def test_unresolved_reference(self) -> None:
        Dangling = UnionType("Dangling", Variant("To", Field("target", Ref("NoSuchUnion"))))
        with pytest.raises(UnionDefinitionError, match="NoSuchUnion"):
            Dangling.To(target=Shape.Point)


class TestGenerics:
    def test_specialization_is_cached(self) -> None:
        assert Box[int] is Box[int]
        assert Box[int] is not Box[str]
        assert str(Box[int]) == "Box[int]"

    def test_specialized_payload_checked(self) -> None:
        assert Box[int].Some(3).payload == (3,)
        with pytest.raises(ShapeMismatch, match="expects int"):
            Box[int].Some("three")

    def test_composite_arguments_cached_by_structure(self) -> None:
        ints = Box[SequenceOf(int)]
        assert Box[SequenceOf(int)] is ints
        assert Box[SequenceOf(str)] is not ints
        assert ints.accepts(Box[SequenceOf(int)].Some([1]))
        assert ints.Some([1]) == Box[SequenceOf(int)].Some((1,))

    def test_unspecialized_accepts_anything(self) -> None:
        assert Box.Some("three").payload == ("three",)

    def test_values_compare_across_specializations(self) -> None:
        assert Box[int].Some(1) == Box.Some(1)
        assert Box[int].Some(1) != Box[object].Some(1)
        assert Box[int].accepts(Box.Some(1))
        assert not Box[int].accepts(Box[str].Some("a"))

    def test_generic_match(self) -> None:
        unwrap = Box.matcher(Some=lambda v: v, Nothing=None)
        assert unwrap(Box[int].Some(5)) == 5
        assert unwrap(Box[int].Nothing) is None

    def test_non_generic_union(self) -> None:
        with pytest.raises(UnionDefinitionError, match="not generic"):
            Shape[int]

    def test_wrong_argument_count(self) -> None:
        with pytest.raises(UnionDefinitionError, match="takes 1"):
            Box[int, str]

    def test_partial_specialization_keeps_parameter(self) -> None:
        Pair = UnionType(
            "Pair",
            Variant("Of", TypeParam("A"), TypeParam("B")),
            params=("A", "B"),
        )
        half = Pair[int, TypeParam("B")]
        assert half.params == ("B",)
        assert half.Of(1, "anything").payload == (1, "anything")
