"""
Size and alignment of interface types under an ABI variant.

``SizeAlign`` is bound to one interface and one ABI variant and answers
``size(ty)`` / ``align(ty)`` for any type reference. The layout follows the
32-bit canonical rules: scalars are naturally aligned, aggregates lay out
their members in order, variants place their payload after the
discriminant.

Example:
    >>> sizes = SizeAlign(iface, AbiVariant.CALLER)
    >>> sizes.size(Primitive.U64), sizes.align(Primitive.U64)
    (8, 8)
"""

from enum import Enum

from abi_docs.errors import UnboundedTypeError
from abi_docs.model import (
    Alias,
    ConstPointer,
    Enumeration,
    Expected,
    Flags,
    Future,
    Handle,
    Interface,
    ListOf,
    Option,
    Pointer,
    Primitive,
    PullBuffer,
    PushBuffer,
    Record,
    Stream,
    Tuple,
    TypeDef,
    TypeId,
    TypeRef,
    Variant,
)


class AbiVariant(str, Enum):
    """Which side of a call owns the representation of params and results.

    ``CALLER``: the caller supplies the representation; results are
    documented as one ``Result`` entry and buffers are passed as
    pointer + length.

    ``CALLEE``: the callee supplies the representation; every named result
    is documented separately and buffers are opaque handles.
    """

    CALLER = "caller"
    CALLEE = "callee"

    @property
    def multi_result(self) -> bool:
        return self is AbiVariant.CALLEE


_PRIMITIVE_LAYOUT: dict[Primitive, tuple[int, int]] = {
    Primitive.UNIT: (0, 1),
    Primitive.BOOL: (1, 1),
    Primitive.U8: (1, 1),
    Primitive.S8: (1, 1),
    Primitive.BYTE: (1, 1),
    Primitive.U16: (2, 2),
    Primitive.S16: (2, 2),
    Primitive.U32: (4, 4),
    Primitive.S32: (4, 4),
    Primitive.FLOAT32: (4, 4),
    Primitive.CHAR: (4, 4),
    Primitive.USIZE: (4, 4),
    Primitive.U64: (8, 8),
    Primitive.S64: (8, 8),
    Primitive.FLOAT64: (8, 8),
    Primitive.STRING: (8, 4),
}

# pointer + length
_SLICE = (8, 4)
# i32 index or address
_WORD = (4, 4)


def align_to(offset: int, align: int) -> int:
    return (offset + align - 1) // align * align


def discriminant_size(cases: int) -> int:
    if cases <= 1 << 8:
        return 1
    if cases <= 1 << 16:
        return 2
    return 4


class SizeAlign:
    """Layout oracle for one ``(interface, variant)`` binding."""

    def __init__(self, iface: Interface, variant: AbiVariant = AbiVariant.CALLER):
        self.iface = iface
        self.variant = AbiVariant(variant)
        self._cache: dict[int, tuple[int, int]] = {}
        # Type ids whose layout is being computed
        self._active: set[int] = set()

    def size(self, ty: TypeRef) -> int:
        return self.layout(ty)[0]

    def align(self, ty: TypeRef) -> int:
        return self.layout(ty)[1]

    def layout(self, ty: TypeRef) -> tuple[int, int]:
        """Return ``(size, align)`` for ``ty``."""
        match ty:
            case Primitive():
                return _PRIMITIVE_LAYOUT[ty]
            case Handle():
                return _WORD
            case TypeId(index=index):
                if index not in self._cache:
                    self._cache[index] = self._id_layout(ty)
                return self._cache[index]
        raise TypeError(f"not a type reference: {ty!r}")

    def _id_layout(self, ty: TypeId) -> tuple[int, int]:
        type_def = self.iface.type_def(ty)
        if ty.index in self._active:
            name = type_def.name or f"type id {ty.index}"
            raise UnboundedTypeError(
                f"{name} contains itself and has no finite size"
            ).with_context(type_id=ty.index, interface=self.iface.name)
        self._active.add(ty.index)
        try:
            return self._def_layout(type_def)
        finally:
            self._active.discard(ty.index)

    def _def_layout(self, ty: TypeDef) -> tuple[int, int]:
        match ty.kind:
            case Alias(target=target):
                return self.layout(target)
            case Record(fields=fields):
                return self._record([f.ty for f in fields])
            case Tuple(types=types):
                return self._record(list(types))
            case Flags(flags=flags):
                return self._flags(len(flags))
            case Enumeration(cases=cases):
                size = discriminant_size(len(cases))
                return size, size
            case Variant(cases=cases):
                return self._variant([c.ty for c in cases])
            case Option(payload=payload):
                return self._variant([None, payload])
            case Expected(ok=ok, err=err):
                return self._variant([ok, err])
            case ListOf():
                return _SLICE
            case Future() | Stream() | Pointer() | ConstPointer():
                return _WORD
            case PushBuffer() | PullBuffer():
                return _SLICE if self.variant is AbiVariant.CALLER else _WORD
        raise TypeError(f"unknown type definition kind: {ty.kind!r}")

    def _record(self, types: list[TypeRef]) -> tuple[int, int]:
        size = 0
        align = 1
        for ty in types:
            field_size, field_align = self.layout(ty)
            size = align_to(size, field_align) + field_size
            align = max(align, field_align)
        return align_to(size, align), align

    def _flags(self, count: int) -> tuple[int, int]:
        if count == 0:
            return 0, 1
        if count <= 8:
            return 1, 1
        if count <= 16:
            return 2, 2
        if count <= 32:
            return 4, 4
        return 4 * ((count + 31) // 32), 4

    def _variant(self, payloads: list[TypeRef | None]) -> tuple[int, int]:
        tag = discriminant_size(len(payloads))
        payload_size = 0
        payload_align = 1
        for ty in payloads:
            if ty is None:
                continue
            size, align = self.layout(ty)
            payload_size = max(payload_size, size)
            payload_align = max(payload_align, align)
        align = max(tag, payload_align)
        return align_to(align_to(tag, payload_align) + payload_size, align), align
