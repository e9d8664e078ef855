"""
Inline type printer.

Turns a type reference into its one-line textual form. Named types become
links to their section; anonymous types are expanded structurally, e.g.
``list<record<x: u32, y: u32>>``.
"""

from abi_docs.anchors import anchor_name
from abi_docs.errors import UnrecognizedShapeError
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
    TypeId,
    TypeRef,
    Variant,
)

# Printed for an absent payload (payload-less expected arm, stream end, ...)
NO_PAYLOAD = "_"


class TypePrinter:
    """Print type references of one interface.

    The printer only reads the interface; it never registers anchors. Links
    it emits point at ``#`` + :func:`anchor_name`, which is the same anchor
    the section header registers for that name.

    Examples:
        >>> printer = TypePrinter(iface)
        >>> printer.format(Primitive.U32)
        'u32'
        >>> printer.format(point_id)
        '[`Point`](#point)'
        >>> printer.format(point_id, skip_name=True)
        'record<x: u32, y: u32>'
    """

    def __init__(self, iface: Interface):
        self.iface = iface

    def format(self, ty: TypeRef | None, skip_name: bool = False) -> str:
        """Return the inline form of ``ty``.

        Args:
            ty: Type reference, or None for an absent payload
            skip_name: Expand a named type structurally instead of linking it

        Returns:
            Inline text for the type
        """
        match ty:
            case None:
                return NO_PAYLOAD
            case Primitive():
                return ty.value
            case Handle():
                return f"handle<{self.iface.resource(ty).name}>"
            case TypeId():
                return self._format_id(ty, skip_name)
        raise TypeError(f"not a type reference: {ty!r}")

    def format_list(self, types) -> str:
        return ", ".join(self.format(ty) for ty in types)

    def _format_id(self, ty: TypeId, skip_name: bool) -> str:
        type_def = self.iface.type_def(ty)
        if not skip_name and type_def.name is not None:
            return f"[`{type_def.name}`](#{anchor_name(type_def.name)})"

        match type_def.kind:
            case Alias(target=target):
                return self.format(target)
            case Tuple(types=types):
                return f"({self.format_list(types)})"
            case Record(fields=fields) if type_def.kind.is_tuple():
                return f"({self.format_list(f.ty for f in fields)})"
            case Record(fields=fields):
                inner = ", ".join(f"{f.name}: {self.format(f.ty)}" for f in fields)
                return f"record<{inner}>"
            case Flags(flags=flags):
                return f"flags<{', '.join(f.name for f in flags)}>"
            case Enumeration(cases=cases):
                return f"enum<{', '.join(c.name for c in cases)}>"
            case Variant():
                return self._format_variant(ty, type_def.kind)
            case Option(payload=payload):
                return f"option<{self.format(payload)}>"
            case Expected(ok=ok, err=err):
                return f"expected<{self.format(ok)}, {self.format(err)}>"
            case ListOf(element=Primitive.CHAR):
                return Primitive.STRING.value
            case ListOf(element=element):
                return f"list<{self.format(element)}>"
            case Future(payload=payload):
                return f"future<{self.format(payload)}>"
            case Stream(element=element, end=end):
                return f"stream<{self.format(element)}, {self.format(end)}>"
            case Pointer(target=target):
                return f"pointer<{self.format(target)}>"
            case ConstPointer(target=target):
                return f"const-pointer<{self.format(target)}>"
            case PushBuffer(target=target):
                return f"push-buffer<{self.format(target)}>"
            case PullBuffer(target=target):
                return f"pull-buffer<{self.format(target)}>"
        raise TypeError(f"unknown type definition kind: {type_def.kind!r}")

    def _format_variant(self, ty: TypeId, variant: Variant) -> str:
        """Normalise variant encodings of expected, bool and option."""
        expected = variant.as_expected()
        if expected is not None:
            ok, err = expected
            return f"expected<{self.format(ok)}, {self.format(err)}>"
        if variant.is_bool():
            return Primitive.BOOL.value
        payload = variant.as_option()
        if payload is not None:
            return f"option<{self.format(payload)}>"
        if not variant.cases:
            raise UnrecognizedShapeError(
                "variant has no cases and cannot be printed inline"
            ).with_context(type_id=ty.index, interface=self.iface.name)
        return f"union<{self.format_list(c.ty for c in variant.cases)}>"
