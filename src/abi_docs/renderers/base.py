"""
Shared state and helpers for the Markdown renderers.

A render pass owns one :class:`RenderContext`: the interface being
documented, the layout oracle bound to the chosen ABI variant, the output
buffer and the anchor registry. Section and function renderers append to
the buffer and register anchors through the context; nothing outlives the
pass.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from abi_docs.anchors import AnchorRegistry, anchor_tag
from abi_docs.errors import InterfaceContractError
from abi_docs.layout import AbiVariant, SizeAlign
from abi_docs.model import Docs, Interface, TypeDef, TypeId
from abi_docs.renderers.types import TypePrinter


@dataclass
class RenderContext:
    """Per-pass accumulator threaded through every renderer.

    Attributes:
        iface: Interface being documented
        variant: ABI variant selected for the pass
        sizes: Layout oracle bound to ``(iface, variant)``
        printer: Inline type printer for ``iface``
        anchors: Anchor registry filled in by section headers
        types_rendered: Named type sections emitted so far
        functions_rendered: Function blocks emitted so far
    """

    iface: Interface
    variant: AbiVariant
    sizes: SizeAlign
    printer: TypePrinter
    anchors: AnchorRegistry = field(default_factory=AnchorRegistry)
    types_rendered: int = 0
    functions_rendered: int = 0
    _parts: list[str] = field(default_factory=list, repr=False)

    @classmethod
    def bind(cls, iface: Interface, variant: AbiVariant) -> "RenderContext":
        variant = AbiVariant(variant)
        return cls(
            iface=iface,
            variant=variant,
            sizes=SizeAlign(iface, variant),
            printer=TypePrinter(iface),
        )

    def push(self, *text: str) -> None:
        self._parts.extend(text)

    def push_ty(self, ty, skip_name: bool = False) -> None:
        self._parts.append(self.printer.format(ty, skip_name))

    def push_docs(self, docs: Docs) -> None:
        """Append docs, one stripped line at a time, indented by two spaces."""
        if docs.contents is None:
            return
        for line in docs.contents.splitlines():
            self._parts.append(f"  {line.strip()}\n")

    def text(self) -> str:
        return "".join(self._parts)


class SectionRenderer(ABC):
    """Base class for the per-kind type section renderers.

    A section is: header with anchor and kind label, docs, the
    ``Size``/``Alignment`` line, then a kind specific body.
    """

    # Kind label printed after the header; None means the inline expansion.
    label: str | None = None

    def render(self, ctx: RenderContext, type_id: TypeId, ty: TypeDef) -> None:
        """Render the section for the named type ``ty``."""
        name = ty.name
        if name is None:
            raise InterfaceContractError(
                f"type id {type_id.index} is anonymous and has no section"
            ).with_context(type_id=type_id.index, interface=ctx.iface.name)
        self._header(ctx, name)
        if self.label is not None:
            ctx.push(self.label)
        else:
            self._inline_label(ctx, type_id, ty)
        ctx.push("\n\n")
        self._info(ctx, type_id, ty.docs)
        self._body(ctx, name, ty)

    def _inline_label(self, ctx: RenderContext, type_id: TypeId, ty: TypeDef) -> None:
        ctx.push_ty(type_id, skip_name=True)

    @abstractmethod
    def _body(self, ctx: RenderContext, name: str, ty: TypeDef) -> None:
        """Emit the kind specific body of the section."""

    def _header(self, ctx: RenderContext, name: str) -> None:
        if ctx.types_rendered == 0:
            ctx.push("# Types\n\n")
        ctx.types_rendered += 1
        anchor = ctx.anchors.register(name)
        ctx.push(f"## {anchor_tag(anchor)} `{name}`: ")

    def _info(self, ctx: RenderContext, type_id: TypeId, docs: Docs) -> None:
        ctx.push_docs(docs)
        ctx.push("\n")
        ctx.push(f"Size: {ctx.sizes.size(type_id)}, Alignment: {ctx.sizes.align(type_id)}\n")

    def _member(self, ctx: RenderContext, name: str, member: str) -> None:
        """Start a list entry for ``name::member`` with its own anchor."""
        anchor = ctx.anchors.register(name, member)
        ctx.push(f"- {anchor_tag(anchor)} [`{member}`](#{anchor})")
