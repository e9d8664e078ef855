"""
Section renderers, one per type definition kind.

``SECTION_RENDERERS`` maps each kind class to the renderer that documents a
named type of that kind. The set of kinds is closed, so every kind in
:data:`abi_docs.model.TypeDefKind` has an entry.
"""

from abc import abstractmethod

from abi_docs.model import (
    Alias,
    ConstPointer,
    Enumeration,
    Expected,
    Flags,
    Future,
    ListOf,
    Option,
    Pointer,
    PullBuffer,
    PushBuffer,
    Record,
    Stream,
    Tuple,
    TypeDef,
    TypeId,
    Variant,
)
from abi_docs.renderers.base import RenderContext, SectionRenderer


class RecordSection(SectionRenderer):
    """Record fields, each anchored as ``Name.field``.

    A record whose fields are all ``bool`` is a flag set in disguise and
    also gets each field's bit index.
    """

    label = "record"

    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        record: Record = ty.kind
        is_flags = record.is_flags()
        ctx.push("\n### Record Fields\n\n")
        for bit, field in enumerate(record.fields):
            self._member(ctx, name, field.name)
            ctx.push(": ")
            ctx.push_ty(field.ty)
            ctx.push("\n\n")
            ctx.push_docs(field.docs)
            if is_flags:
                ctx.push(f"Bit: {bit}\n")
            ctx.push("\n")


class TupleSection(SectionRenderer):
    label = "tuple"

    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        ctx.push("\n### Tuple Types\n\n")
        for element in ty.kind.types:
            ctx.push("- ")
            ctx.push_ty(element)
            ctx.push("\n")


class FlagsSection(SectionRenderer):
    label = "flags"

    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        ctx.push("\n### Flags Fields\n\n")
        for bit, flag in enumerate(ty.kind.flags):
            self._member(ctx, name, flag.name)
            ctx.push("\n\n")
            ctx.push_docs(flag.docs)
            ctx.push(f"Bit: {bit}\n")
            ctx.push("\n")


class VariantSection(SectionRenderer):
    """Variant cases; the payload type is printed only when present."""

    label = "variant"

    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        ctx.push("\n### Variant Cases\n\n")
        for case in ty.kind.cases:
            self._member(ctx, name, case.name)
            if case.ty is not None:
                ctx.push(": ")
                ctx.push_ty(case.ty)
            ctx.push("\n\n")
            ctx.push_docs(case.docs)
            ctx.push("\n")


class EnumSection(SectionRenderer):
    label = "enum"

    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        ctx.push("\n### Enum Cases\n\n")
        for case in ty.kind.cases:
            self._member(ctx, name, case.name)
            ctx.push("\n\n")
            ctx.push_docs(case.docs)
            ctx.push("\n")


class _SingleSection(SectionRenderer):
    """One unlabeled entry holding the wrapped type (option, future)."""

    heading = ""

    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        ctx.push(f"\n### {self.heading}\n\n- ")
        ctx.push_ty(ty.kind.payload)
        ctx.push("\n\n")


class OptionSection(_SingleSection):
    label = "option"
    heading = "Option"


class FutureSection(_SingleSection):
    label = "future"
    heading = "Future"


class _PairSection(SectionRenderer):
    """Two entries labeled ``ok`` and ``err`` (expected, stream)."""

    heading = ""

    @abstractmethod
    def _pair(self, ty: TypeDef):
        """Return the ``(ok, err)`` payloads."""

    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        ok, err = self._pair(ty)
        ctx.push(f"\n### {self.heading}\n\n")
        ctx.push("- ok: ")
        ctx.push_ty(ok)
        ctx.push("\n")
        ctx.push("- err: ")
        ctx.push_ty(err)
        ctx.push("\n\n")


class ExpectedSection(_PairSection):
    label = "expected"
    heading = "Expected"

    def _pair(self, ty: TypeDef):
        return ty.kind.ok, ty.kind.err


class StreamSection(_PairSection):
    label = "stream"
    heading = "Stream"

    def _pair(self, ty: TypeDef):
        return ty.kind.element, ty.kind.end


class AliasSection(SectionRenderer):
    """Aliases and structural kinds: the expansion is the whole section.

    An alias shows its target expanded; a named list, pointer or buffer
    shows its own structure.
    """

    def _inline_label(self, ctx: RenderContext, type_id: TypeId, ty: TypeDef) -> None:
        if isinstance(ty.kind, Alias):
            ctx.push_ty(ty.kind.target, skip_name=True)
        else:
            ctx.push_ty(type_id, skip_name=True)

    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        ctx.push("\n")


SECTION_RENDERERS: dict[type, SectionRenderer] = {
    Record: RecordSection(),
    Tuple: TupleSection(),
    Flags: FlagsSection(),
    Variant: VariantSection(),
    Enumeration: EnumSection(),
    Option: OptionSection(),
    Expected: ExpectedSection(),
    Future: FutureSection(),
    Stream: StreamSection(),
    Alias: AliasSection(),
    ListOf: AliasSection(),
    Pointer: AliasSection(),
    ConstPointer: AliasSection(),
    PushBuffer: AliasSection(),
    PullBuffer: AliasSection(),
}


def section_for(ty: TypeDef) -> SectionRenderer:
    return SECTION_RENDERERS[type(ty.kind)]
