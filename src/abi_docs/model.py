"""
Interface model consumed by the renderers.

An interface is a typed graph: a table of type definitions (named or
anonymous), a list of functions and a table of resources. Type references
point into those tables by index, so shared sub-types are stored once and
referenced from every use site.

The model is built by :mod:`abi_docs.loader` and is read-only for the
duration of a render pass.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from abi_docs.errors import UnknownResourceError, UnresolvedTypeError


class Primitive(str, Enum):
    """Primitive type tags. The value is the token printed in documents."""

    UNIT = "unit"
    BOOL = "bool"
    U8 = "u8"
    S8 = "s8"
    U16 = "u16"
    S16 = "s16"
    U32 = "u32"
    S32 = "s32"
    U64 = "u64"
    S64 = "s64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    CHAR = "char"
    BYTE = "byte"
    USIZE = "usize"
    STRING = "string"


@dataclass(frozen=True)
class Handle:
    """Reference to a resource by its index in ``Interface.resources``."""

    resource: int


@dataclass(frozen=True)
class TypeId:
    """Reference to a type definition by its index in ``Interface.types``."""

    index: int


TypeRef = Union[Primitive, Handle, TypeId]


@dataclass(frozen=True)
class Docs:
    contents: str | None = None


NO_DOCS = Docs()


# =============================================================================
# Members
# =============================================================================

@dataclass(frozen=True)
class Field:
    name: str
    ty: TypeRef
    docs: Docs = NO_DOCS


@dataclass(frozen=True)
class Flag:
    name: str
    docs: Docs = NO_DOCS


@dataclass(frozen=True)
class Case:
    """Variant case; ``ty`` is None when the case carries no payload."""

    name: str
    ty: TypeRef | None = None
    docs: Docs = NO_DOCS


@dataclass(frozen=True)
class EnumCase:
    name: str
    docs: Docs = NO_DOCS


# =============================================================================
# Type definition kinds
# =============================================================================

@dataclass(frozen=True)
class Alias:
    target: TypeRef


@dataclass(frozen=True)
class Record:
    fields: tuple[Field, ...] = ()

    def is_flags(self) -> bool:
        """True when every field is a ``bool`` (a flag set in disguise)."""
        return bool(self.fields) and all(f.ty is Primitive.BOOL for f in self.fields)

    def is_tuple(self) -> bool:
        """True when fields are named ``0``, ``1``, ... in declaration order."""
        return bool(self.fields) and all(
            f.name == str(i) for i, f in enumerate(self.fields)
        )


@dataclass(frozen=True)
class Tuple:
    types: tuple[TypeRef, ...] = ()


@dataclass(frozen=True)
class Flags:
    flags: tuple[Flag, ...] = ()


@dataclass(frozen=True)
class Variant:
    """Tagged union whose cases may carry a payload.

    Some ABI variants have no dedicated ``bool``/``option``/``expected``
    kinds and encode them as two-case variants; the ``is_bool``,
    ``as_option`` and ``as_expected`` recognisers recover those shapes.
    """

    cases: tuple[Case, ...] = ()

    def as_expected(self) -> tuple[TypeRef | None, TypeRef | None] | None:
        if len(self.cases) != 2:
            return None
        ok, err = self.cases
        if ok.name != "ok" or err.name != "err":
            return None
        return ok.ty, err.ty

    def is_bool(self) -> bool:
        return len(self.cases) == 2 and all(c.ty is None for c in self.cases)

    def as_option(self) -> TypeRef | None:
        if len(self.cases) != 2:
            return None
        first, second = self.cases
        if first.ty is None and second.ty is not None:
            return second.ty
        if second.ty is None and first.ty is not None:
            return first.ty
        return None


@dataclass(frozen=True)
class Enumeration:
    cases: tuple[EnumCase, ...] = ()


@dataclass(frozen=True)
class ListOf:
    element: TypeRef


@dataclass(frozen=True)
class Option:
    payload: TypeRef


@dataclass(frozen=True)
class Expected:
    ok: TypeRef | None = None
    err: TypeRef | None = None


@dataclass(frozen=True)
class Future:
    payload: TypeRef | None = None


@dataclass(frozen=True)
class Stream:
    element: TypeRef | None = None
    end: TypeRef | None = None


@dataclass(frozen=True)
class Pointer:
    target: TypeRef


@dataclass(frozen=True)
class ConstPointer:
    target: TypeRef


@dataclass(frozen=True)
class PushBuffer:
    target: TypeRef


@dataclass(frozen=True)
class PullBuffer:
    target: TypeRef


TypeDefKind = Union[
    Alias,
    Record,
    Tuple,
    Flags,
    Variant,
    Enumeration,
    ListOf,
    Option,
    Expected,
    Future,
    Stream,
    Pointer,
    ConstPointer,
    PushBuffer,
    PullBuffer,
]


@dataclass(frozen=True)
class TypeDef:
    """A type definition. Named definitions get their own document section."""

    kind: TypeDefKind
    name: str | None = None
    docs: Docs = NO_DOCS


# =============================================================================
# Functions, resources, interface
# =============================================================================

@dataclass(frozen=True)
class Param:
    name: str
    ty: TypeRef


@dataclass(frozen=True)
class Function:
    name: str
    params: tuple[Param, ...] = ()
    results: tuple[Param, ...] = ()
    docs: Docs = NO_DOCS


@dataclass(frozen=True)
class Resource:
    name: str
    docs: Docs = NO_DOCS


@dataclass
class Interface:
    """The typed graph for one interface document.

    Attributes:
        name: Interface name (usually the document stem)
        types: Type table, in declaration order
        functions: Functions, in declaration order
        resources: Resource table indexed by ``Handle.resource``
    """

    name: str = ""
    types: list[TypeDef] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    resources: list[Resource] = field(default_factory=list)

    def type_def(self, ty: TypeId) -> TypeDef:
        if not 0 <= ty.index < len(self.types):
            raise UnresolvedTypeError(
                f"type id {ty.index} does not resolve in interface {self.name!r}"
            ).with_context(type_id=ty.index, interface=self.name)
        return self.types[ty.index]

    def resource(self, handle: Handle) -> Resource:
        if not 0 <= handle.resource < len(self.resources):
            raise UnknownResourceError(
                f"resource {handle.resource} is not declared in interface {self.name!r}"
            ).with_context(resource=handle.resource, interface=self.name)
        return self.resources[handle.resource]

    def named_types(self) -> Iterator[tuple[TypeId, TypeDef]]:
        """Yield ``(TypeId, TypeDef)`` for every named type in declaration order."""
        for index, ty in enumerate(self.types):
            if ty.name is not None:
                yield TypeId(index), ty
