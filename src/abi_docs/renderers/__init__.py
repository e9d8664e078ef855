"""
Renderers module for ABI documentation.

Provides the inline type printer, the per-kind section renderers, the
function renderer and the document assembler tying them together.
"""

from abi_docs.renderers.base import RenderContext, SectionRenderer
from abi_docs.renderers.document import DocumentRenderer, RenderResult, render
from abi_docs.renderers.functions import FunctionRenderer
from abi_docs.renderers.sections import SECTION_RENDERERS, section_for
from abi_docs.renderers.types import TypePrinter

__all__ = [
    "RenderContext",
    "SectionRenderer",
    "DocumentRenderer",
    "RenderResult",
    "render",
    "FunctionRenderer",
    "SECTION_RENDERERS",
    "section_for",
    "TypePrinter",
]
