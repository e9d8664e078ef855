"""
Document assembler.

Drives the section renderers over every named type and the function
renderer over every function, in declaration order, producing the Markdown
text and the anchor map of one interface.
"""

from typing import NamedTuple

from abi_docs.layout import AbiVariant
from abi_docs.model import Interface
from abi_docs.renderers.base import RenderContext
from abi_docs.renderers.functions import FunctionRenderer
from abi_docs.renderers.sections import section_for


class RenderResult(NamedTuple):
    """Output of one render pass: Markdown text and logical name -> ``#anchor``."""

    text: str
    hrefs: dict[str, str]


class DocumentRenderer:
    """Render an interface to ABI documentation.

    Manifesto:
        The document is a pure function of the interface, in declaration
        order, and the ABI variant. Rendering the same input twice yields
        byte-identical text, which is what check mode relies on.

    Architecture:
        ```
        Interface ──► RenderContext.bind(iface, variant)
                              │
                              ├──► SectionRenderer per named type
                              │         └──► TypePrinter for sub-types
                              │
                              └──► FunctionRenderer per function
                              │
                              ▼
                   RenderResult(text, hrefs)
        ```

    Guardrails:
        - Contract errors (dangling type ids, unknown resources) propagate;
          no partial document is returned.
        - A fresh context per call; nothing is shared between passes.
    """

    def __init__(self, variant: AbiVariant = AbiVariant.CALLER):
        self.variant = AbiVariant(variant)
        self.functions = FunctionRenderer()

    def render(self, iface: Interface) -> RenderResult:
        ctx = RenderContext.bind(iface, self.variant)

        for type_id, ty in iface.named_types():
            section_for(ty).render(ctx, type_id, ty)

        for func in iface.functions:
            self.functions.render(ctx, func)

        return RenderResult(text=ctx.text(), hrefs=ctx.anchors.to_dict())


def render(iface: Interface, variant: AbiVariant = AbiVariant.CALLER) -> RenderResult:
    """Render ``iface`` under ``variant``; returns ``(text, hrefs)``."""
    return DocumentRenderer(variant).render(iface)
