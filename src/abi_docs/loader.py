"""
Interface document loader.

Reads a ``*.wit.yaml`` / ``*.wit.json`` document and builds the
:class:`~abi_docs.model.Interface` graph the renderers consume. The
document schema is validated with pydantic; references between types are
resolved by name, in any order.

Document shape:
    ```yaml
    name: geometry
    resources:
      - name: canvas
    types:
      - name: point
        docs: A point on the plane.
        record:
          fields:
            - {name: x, type: u32}
            - {name: y, type: u32}
      - name: points
        list: point
      - name: lookup
        option: {tuple: [point, string]}
    functions:
      - name: translate
        params:
          - {name: p, type: point}
          - {name: by, type: {list: s32}}
        result: point
    ```

A type reference is a primitive token (``u32``, ``string``, ...), the name
of a declared type, ``handle<resource>``, or a single-key mapping that
declares an anonymous type inline.
"""

import json
import re
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from abi_docs.errors import InterfaceLoadError, UnboundedTypeError
from abi_docs.layout import SizeAlign
from abi_docs.model import (
    Alias,
    Case,
    ConstPointer,
    Docs,
    EnumCase,
    Enumeration,
    Expected,
    Field as FieldDef,
    Flag,
    Flags,
    Function,
    Future,
    Handle,
    Interface,
    ListOf,
    Option,
    Param,
    Pointer,
    Primitive,
    PullBuffer,
    PushBuffer,
    Record,
    Resource,
    Stream,
    Tuple,
    TypeDef,
    TypeDefKind,
    TypeId,
    TypeRef,
    Variant,
)

# Suffixes recognised as interface documents
INTERFACE_SUFFIXES = (".wit.yaml", ".wit.yml", ".wit.json")

_HANDLE_RE = re.compile(r"^handle<\s*([^<>\s]+)\s*>$")

TypeExpr = Union[str, dict[str, Any]]


# =============================================================================
# Document schema
# =============================================================================

class _Decl(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class MemberDecl(_Decl):
    name: str
    docs: str | None = None


class FieldDecl(_Decl):
    name: str
    type: TypeExpr
    docs: str | None = None


class CaseDecl(_Decl):
    name: str
    type: TypeExpr | None = None
    docs: str | None = None


class RecordDecl(_Decl):
    fields: list[FieldDecl] = Field(default_factory=list)


class VariantDecl(_Decl):
    cases: list[CaseDecl] = Field(default_factory=list)


class ExpectedDecl(_Decl):
    ok: TypeExpr | None = None
    err: TypeExpr | None = None


class StreamDecl(_Decl):
    element: TypeExpr | None = None
    end: TypeExpr | None = None


# Field name -> document key for every kind a type body may declare.
KIND_KEYS = {
    "type_": "type",
    "record": "record",
    "tuple": "tuple",
    "flags": "flags",
    "enum": "enum",
    "variant": "variant",
    "list_": "list",
    "option": "option",
    "expected": "expected",
    "future": "future",
    "stream": "stream",
    "pointer": "pointer",
    "const_pointer": "const-pointer",
    "push_buffer": "push-buffer",
    "pull_buffer": "pull-buffer",
}


class TypeBody(_Decl):
    """Exactly one kind key, e.g. ``{record: {...}}`` or ``{list: u8}``."""

    type_: TypeExpr | None = Field(default=None, alias="type")
    record: RecordDecl | None = None
    tuple: list[TypeExpr] | None = None
    flags: list[MemberDecl | str] | None = None
    enum: list[MemberDecl | str] | None = None
    variant: VariantDecl | None = None
    list_: TypeExpr | None = Field(default=None, alias="list")
    option: TypeExpr | None = None
    expected: ExpectedDecl | None = None
    future: TypeExpr | None = None
    stream: StreamDecl | None = None
    pointer: TypeExpr | None = None
    const_pointer: TypeExpr | None = Field(default=None, alias="const-pointer")
    push_buffer: TypeExpr | None = Field(default=None, alias="push-buffer")
    pull_buffer: TypeExpr | None = Field(default=None, alias="pull-buffer")

    @model_validator(mode="after")
    def _one_kind(self) -> "TypeBody":
        keys = self.kind_keys()
        if len(keys) != 1:
            found = ", ".join(KIND_KEYS[k] for k in keys) or "none"
            raise ValueError(f"expected exactly one kind key, found: {found}")
        return self

    def kind_keys(self) -> list[str]:
        return [k for k in KIND_KEYS if k in self.model_fields_set]

    @property
    def kind_key(self) -> str:
        return self.kind_keys()[0]


class TypeDecl(TypeBody):
    name: str
    docs: str | None = None


class ParamDecl(_Decl):
    name: str
    type: TypeExpr


class FunctionDecl(_Decl):
    name: str
    docs: str | None = None
    params: list[ParamDecl] = Field(default_factory=list)
    results: list[ParamDecl] = Field(default_factory=list)
    result: TypeExpr | None = None

    @model_validator(mode="after")
    def _one_result_form(self) -> "FunctionDecl":
        if self.result is not None and self.results:
            raise ValueError("declare either 'result' or 'results', not both")
        return self


class ResourceDecl(_Decl):
    name: str
    docs: str | None = None


class InterfaceDecl(_Decl):
    name: str | None = None
    resources: list[ResourceDecl | str] = Field(default_factory=list)
    types: list[TypeDecl] = Field(default_factory=list)
    functions: list[FunctionDecl] = Field(default_factory=list)


# =============================================================================
# Graph builder
# =============================================================================

def _member(entry: MemberDecl | str) -> MemberDecl:
    if isinstance(entry, str):
        return MemberDecl(name=entry)
    return entry


class InterfaceBuilder:
    """Build an :class:`Interface` from a validated document.

    Named types occupy the first slots of the type table, in declaration
    order, so references between them resolve regardless of order.
    Anonymous types declared inline are appended after them.
    """

    def __init__(self, decl: InterfaceDecl, name: str = ""):
        self.decl = decl
        self.name = decl.name or name
        self.types: list[TypeDef | None] = [None] * len(decl.types)
        self.type_ids: dict[str, TypeId] = {}
        self.handles: dict[str, Handle] = {}

    def build(self) -> Interface:
        resources = []
        for index, entry in enumerate(self.decl.resources):
            resource = ResourceDecl(name=entry) if isinstance(entry, str) else entry
            if resource.name in self.handles:
                raise InterfaceLoadError(f"duplicate resource: {resource.name}")
            self.handles[resource.name] = Handle(index)
            resources.append(Resource(name=resource.name, docs=Docs(resource.docs)))

        for index, type_decl in enumerate(self.decl.types):
            if type_decl.name in self.type_ids:
                raise InterfaceLoadError(f"duplicate type: {type_decl.name}")
            self.type_ids[type_decl.name] = TypeId(index)

        for index, type_decl in enumerate(self.decl.types):
            self.types[index] = TypeDef(
                kind=self._kind(type_decl),
                name=type_decl.name,
                docs=Docs(type_decl.docs),
            )

        functions = [self._function(f) for f in self.decl.functions]

        iface = Interface(
            name=self.name,
            types=list(self.types),
            functions=functions,
            resources=resources,
        )
        self._check_bounded(iface)
        return iface

    def _check_bounded(self, iface: Interface) -> None:
        """Reject named types that contain themselves by value."""
        sizes = SizeAlign(iface)
        for type_id, ty in iface.named_types():
            try:
                sizes.layout(type_id)
            except UnboundedTypeError as e:
                raise InterfaceLoadError(
                    f"type {ty.name} contains itself; "
                    "recursion must go through a list, handle or pointer",
                    cause=e,
                ).with_context(type=ty.name) from e

    def resolve(self, expr: TypeExpr | None) -> TypeRef | None:
        """Resolve a type reference expression."""
        if expr is None:
            return None
        if isinstance(expr, str):
            return self._resolve_name(expr.strip())
        if isinstance(expr, dict):
            body = TypeBody.model_validate(expr)
            self.types.append(TypeDef(kind=self._kind(body)))
            return TypeId(len(self.types) - 1)
        raise InterfaceLoadError(f"invalid type reference: {expr!r}")

    def _require(self, expr: TypeExpr) -> TypeRef:
        ty = self.resolve(expr)
        if ty is None:
            raise InterfaceLoadError("a type is required here")
        return ty

    def _resolve_name(self, name: str) -> TypeRef:
        try:
            return Primitive(name)
        except ValueError:
            pass
        match = _HANDLE_RE.match(name)
        if match:
            resource = match.group(1)
            if resource not in self.handles:
                raise InterfaceLoadError(f"unknown resource: {resource}")
            return self.handles[resource]
        if name in self.type_ids:
            return self.type_ids[name]
        raise InterfaceLoadError(f"unknown type: {name}")

    def _kind(self, body: TypeBody) -> TypeDefKind:
        key = body.kind_key
        value = getattr(body, key)
        match key:
            case "type_":
                return Alias(self._require(value))
            case "record":
                fields = value.fields if value else []
                return Record(tuple(
                    FieldDef(f.name, self._require(f.type), Docs(f.docs)) for f in fields
                ))
            case "tuple":
                return Tuple(tuple(self._require(t) for t in value or ()))
            case "flags":
                return Flags(tuple(
                    Flag(m.name, Docs(m.docs)) for m in map(_member, value or ())
                ))
            case "enum":
                return Enumeration(tuple(
                    EnumCase(m.name, Docs(m.docs)) for m in map(_member, value or ())
                ))
            case "variant":
                cases = value.cases if value else []
                return Variant(tuple(
                    Case(c.name, self.resolve(c.type), Docs(c.docs)) for c in cases
                ))
            case "list_":
                return ListOf(self._require(value))
            case "option":
                return Option(self._require(value))
            case "expected":
                value = value or ExpectedDecl()
                return Expected(self.resolve(value.ok), self.resolve(value.err))
            case "future":
                return Future(self.resolve(value))
            case "stream":
                value = value or StreamDecl()
                return Stream(self.resolve(value.element), self.resolve(value.end))
            case "pointer":
                return Pointer(self._require(value))
            case "const_pointer":
                return ConstPointer(self._require(value))
            case "push_buffer":
                return PushBuffer(self._require(value))
            case "pull_buffer":
                return PullBuffer(self._require(value))
        raise InterfaceLoadError(f"unsupported type kind: {key}")

    def _function(self, decl: FunctionDecl) -> Function:
        params = tuple(Param(p.name, self._require(p.type)) for p in decl.params)
        if decl.result is not None:
            results = (Param("result", self._require(decl.result)),)
        else:
            results = tuple(Param(r.name, self._require(r.type)) for r in decl.results)
        return Function(
            name=decl.name,
            params=params,
            results=results,
            docs=Docs(decl.docs),
        )


# =============================================================================
# Entry points
# =============================================================================

def interface_stem(path: Path, suffixes: tuple[str, ...] = INTERFACE_SUFFIXES) -> str | None:
    """File name without its interface suffix, or None for other files."""
    for suffix in suffixes:
        if path.name.endswith(suffix) and len(path.name) > len(suffix):
            return path.name[: -len(suffix)]
    return None


def interface_from_dict(data: dict[str, Any], name: str = "") -> Interface:
    """Validate a document mapping and build its interface graph.

    Args:
        data: Parsed document
        name: Interface name used when the document has none

    Returns:
        Interface graph

    Raises:
        InterfaceLoadError: The document is malformed or references an
            undeclared type or resource
    """
    if not isinstance(data, dict):
        raise InterfaceLoadError(
            f"interface document must be a mapping, got {type(data).__name__}"
        )
    try:
        decl = InterfaceDecl.model_validate(data)
        return InterfaceBuilder(decl, name=name).build()
    except ValidationError as e:
        raise InterfaceLoadError(f"invalid interface document: {e}", cause=e) from e


def load_interface(path: Path) -> Interface:
    """Read and build the interface stored at ``path``."""
    path = Path(path)
    name = interface_stem(path) or path.stem
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InterfaceLoadError(f"failed to read {path}", cause=e).with_context(
            path=str(path)
        ) from e

    try:
        if path.name.endswith(".json"):
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InterfaceLoadError(f"failed to parse {path}: {e}", cause=e).with_context(
            path=str(path)
        ) from e

    try:
        return interface_from_dict(data or {}, name=name)
    except InterfaceLoadError as e:
        raise e.with_context(path=str(path))
