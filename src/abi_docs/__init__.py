"""
ABI Documentation Package

Renders interface definitions (types, records, variants, flags, enums,
functions) to cross-linked Markdown, annotated with each type's size and
alignment under an ABI variant.

Example:
    >>> from abi_docs import AbiVariant, load_interface, render
    >>> iface = load_interface(Path("api.wit.yaml"))
    >>> text, hrefs = render(iface, AbiVariant.CALLER)
"""

__version__ = "0.1.0"

from abi_docs.anchors import AnchorRegistry, anchor_name
from abi_docs.config import AbiDocsConfig
from abi_docs.errors import AbiDocsError, InterfaceContractError
from abi_docs.layout import AbiVariant, SizeAlign
from abi_docs.loader import interface_from_dict, load_interface
from abi_docs.model import Interface
from abi_docs.orchestrator import DocumentationOrchestrator
from abi_docs.renderers import DocumentRenderer, RenderResult, render

__all__ = [
    "AnchorRegistry",
    "anchor_name",
    "AbiDocsConfig",
    "AbiDocsError",
    "InterfaceContractError",
    "AbiVariant",
    "SizeAlign",
    "interface_from_dict",
    "load_interface",
    "Interface",
    "DocumentationOrchestrator",
    "DocumentRenderer",
    "RenderResult",
    "render",
    "__version__",
]
