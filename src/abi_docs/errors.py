"""
Structured error types for abi-docs.

Every error carries a category, a context mapping and an optional cause so
the CLI can report it uniformly and logs can serialise it with ``to_dict()``.

Two families exist:

- **Contract errors** are raised by the renderer when the interface graph
  breaks an invariant the loader is supposed to guarantee (a dangling type
  id, an unknown resource, a variant with no recognisable shape). They abort
  the render pass; no partial output is produced.
- **Surrounding-layer errors** come from loading documents, configuration and
  check mode.

Examples:
    >>> error = UnresolvedTypeError("type id 7 does not resolve")
    >>> error.category
    <ErrorCategory.CONTRACT: 'CONTRACT'>
    >>> error.with_context(type_id=7).context["type_id"]
    7
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for reporting and exit codes."""

    CONTRACT = "CONTRACT"
    LOAD = "LOAD"
    CONFIG = "CONFIG"
    CHECK = "CHECK"
    INTERNAL = "INTERNAL"


class AbiDocsError(Exception):
    """Base class for all abi-docs errors.

    Args:
        message: Human readable message
        category: Overrides the class default category
        context: Extra metadata (paths, type ids, names)
        cause: Underlying exception, chained as ``__cause__``
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> "AbiDocsError":
        """Add context to this error (fluent API).

        Usage:
            raise InterfaceLoadError("bad document").with_context(path=str(path))
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONTRACT ERRORS (fatal, raised while rendering)
# =============================================================================


class InterfaceContractError(AbiDocsError):
    """The interface graph violates an invariant the renderer relies on."""

    default_category = ErrorCategory.CONTRACT


class UnresolvedTypeError(InterfaceContractError):
    """A type id does not resolve to a definition."""


class UnknownResourceError(InterfaceContractError):
    """A handle refers to a resource that is not declared."""


class UnrecognizedShapeError(InterfaceContractError):
    """A variant cannot be described as bool, option, expected or union."""


class UnboundedTypeError(InterfaceContractError):
    """A type contains itself other than through a list, handle or pointer."""


# =============================================================================
# SURROUNDING-LAYER ERRORS
# =============================================================================


class InterfaceLoadError(AbiDocsError):
    """An interface document could not be read or is malformed."""

    default_category = ErrorCategory.LOAD


class ConfigError(AbiDocsError):
    """Invalid configuration value or file."""

    default_category = ErrorCategory.CONFIG


class OutOfDateError(AbiDocsError):
    """Check mode found a rendered document that differs from its source."""

    default_category = ErrorCategory.CHECK

    def __init__(self, path: str, message: str | None = None):
        super().__init__(message or f"not up to date: {path}", context={"path": path})
        self.path = path


@dataclass
class ErrorReport:
    """Errors collected across a multi-file run."""

    errors: list[AbiDocsError] = field(default_factory=list)

    def add(self, error: AbiDocsError) -> None:
        self.errors.append(error)

    def __bool__(self) -> bool:
        return bool(self.errors)

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self.errors]
