"""Tests for the size/alignment oracle."""

import pytest

from abi_docs.errors import InterfaceContractError, UnboundedTypeError, UnresolvedTypeError
from abi_docs.layout import AbiVariant, SizeAlign, align_to, discriminant_size
from abi_docs.model import (
    Alias,
    Case,
    EnumCase,
    Enumeration,
    Expected,
    Field,
    Flag,
    Flags,
    Handle,
    Interface,
    ListOf,
    Option,
    Primitive,
    PullBuffer,
    PushBuffer,
    Record,
    Resource,
    Tuple,
    TypeDef,
    TypeId,
    Variant,
)


def layout_of(kind, variant=AbiVariant.CALLER, *named: TypeDef) -> tuple[int, int]:
    iface = Interface(types=[*named, TypeDef(kind=kind)], resources=[Resource("r")])
    return SizeAlign(iface, variant).layout(TypeId(len(named)))


class TestHelpers:
    def test_align_to(self):
        assert align_to(0, 4) == 0
        assert align_to(1, 4) == 4
        assert align_to(8, 8) == 8
        assert align_to(9, 8) == 16

    def test_discriminant_size(self):
        assert discriminant_size(2) == 1
        assert discriminant_size(256) == 1
        assert discriminant_size(257) == 2
        assert discriminant_size(70000) == 4


class TestPrimitives:
    @pytest.mark.parametrize(
        "primitive, expected",
        [
            (Primitive.UNIT, (0, 1)),
            (Primitive.BOOL, (1, 1)),
            (Primitive.U8, (1, 1)),
            (Primitive.S16, (2, 2)),
            (Primitive.U32, (4, 4)),
            (Primitive.CHAR, (4, 4)),
            (Primitive.FLOAT64, (8, 8)),
            (Primitive.U64, (8, 8)),
            (Primitive.STRING, (8, 4)),
        ],
    )
    def test_primitive_layout(self, primitive, expected):
        sizes = SizeAlign(Interface())
        assert (sizes.size(primitive), sizes.align(primitive)) == expected

    def test_handle(self):
        sizes = SizeAlign(Interface(resources=[Resource("r")]))
        assert sizes.layout(Handle(0)) == (4, 4)


class TestAggregates:
    def test_point(self):
        record = Record((Field("x", Primitive.U32), Field("y", Primitive.U32)))
        assert layout_of(record) == (8, 4)

    def test_record_padding_between_fields(self):
        record = Record((Field("a", Primitive.U8), Field("b", Primitive.U32)))
        assert layout_of(record) == (8, 4)

    def test_record_tail_padding(self):
        record = Record((Field("a", Primitive.U64), Field("b", Primitive.U8)))
        assert layout_of(record) == (16, 8)

    def test_empty_record(self):
        assert layout_of(Record(())) == (0, 1)

    def test_tuple(self):
        tuple_ = Tuple((Primitive.U8, Primitive.U16, Primitive.U8))
        assert layout_of(tuple_) == (6, 2)

    def test_alias_resolves_to_target(self):
        assert layout_of(Alias(Primitive.U64)) == (8, 8)

    def test_nested_named_record(self):
        point = TypeDef(
            kind=Record((Field("x", Primitive.U32), Field("y", Primitive.U32))),
            name="Point",
        )
        line = Record((Field("from", TypeId(0)), Field("to", TypeId(0)), Field("w", Primitive.U8)))
        assert layout_of(line, AbiVariant.CALLER, point) == (20, 4)


class TestFlagsAndEnums:
    @pytest.mark.parametrize(
        "count, expected",
        [(0, (0, 1)), (3, (1, 1)), (8, (1, 1)), (9, (2, 2)), (17, (4, 4)), (33, (8, 4)), (65, (12, 4))],
    )
    def test_flags(self, count, expected):
        flags = Flags(tuple(Flag(f"f{i}") for i in range(count)))
        assert layout_of(flags) == expected

    def test_small_enum(self):
        enum = Enumeration(tuple(EnumCase(f"c{i}") for i in range(3)))
        assert layout_of(enum) == (1, 1)

    def test_large_enum(self):
        enum = Enumeration(tuple(EnumCase(f"c{i}") for i in range(300)))
        assert layout_of(enum) == (2, 2)


class TestVariants:
    def test_option(self):
        assert layout_of(Option(Primitive.U32)) == (8, 4)
        assert layout_of(Option(Primitive.U8)) == (2, 1)

    def test_expected(self):
        assert layout_of(Expected(Primitive.U64, Primitive.STRING)) == (16, 8)

    def test_expected_without_payloads(self):
        assert layout_of(Expected()) == (1, 1)

    def test_variant(self):
        variant = Variant((Case("a", Primitive.U8), Case("b", Primitive.U16), Case("c")))
        assert layout_of(variant) == (4, 2)


class TestVariantDependentLayout:
    def test_list_is_pointer_and_length(self):
        assert layout_of(ListOf(Primitive.U8), AbiVariant.CALLER) == (8, 4)
        assert layout_of(ListOf(Primitive.U8), AbiVariant.CALLEE) == (8, 4)

    @pytest.mark.parametrize("kind", [PushBuffer(Primitive.U8), PullBuffer(Primitive.U32)])
    def test_buffers_depend_on_variant(self, kind):
        assert layout_of(kind, AbiVariant.CALLER) == (8, 4)
        assert layout_of(kind, AbiVariant.CALLEE) == (4, 4)

    def test_variant_accepts_string_value(self):
        sizes = SizeAlign(Interface(), "callee")
        assert sizes.variant is AbiVariant.CALLEE

    def test_multi_result(self):
        assert AbiVariant.CALLEE.multi_result
        assert not AbiVariant.CALLER.multi_result


class TestErrors:
    def test_dangling_type_id(self):
        with pytest.raises(UnresolvedTypeError):
            SizeAlign(Interface()).size(TypeId(0))


class TestRecursiveTypes:
    """Types may refer to themselves only through an indirection."""

    def test_alias_cycle(self):
        iface = Interface(types=[
            TypeDef(kind=Alias(TypeId(1)), name="a"),
            TypeDef(kind=Alias(TypeId(0)), name="b"),
        ])
        with pytest.raises(UnboundedTypeError) as exc_info:
            SizeAlign(iface).size(TypeId(0))
        assert exc_info.value.context["type_id"] == 0

    def test_record_containing_itself_through_option(self):
        iface = Interface(types=[
            TypeDef(kind=Record((Field("next", TypeId(1)),)), name="node"),
            TypeDef(kind=Option(TypeId(0))),
        ])
        with pytest.raises(InterfaceContractError, match="node contains itself"):
            SizeAlign(iface).layout(TypeId(0))

    def test_recursion_through_list(self):
        iface = Interface(types=[
            TypeDef(kind=Record((Field("kids", TypeId(1)), Field("v", Primitive.U8))), name="tree"),
            TypeDef(kind=ListOf(TypeId(0))),
        ])
        assert SizeAlign(iface).layout(TypeId(0)) == (12, 4)

    def test_oracle_usable_after_error(self):
        iface = Interface(types=[
            TypeDef(kind=Alias(TypeId(0)), name="loop"),
            TypeDef(kind=Alias(Primitive.U16), name="ok"),
        ])
        sizes = SizeAlign(iface)
        with pytest.raises(UnboundedTypeError):
            sizes.size(TypeId(0))
        assert sizes.layout(TypeId(1)) == (2, 2)
