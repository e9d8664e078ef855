"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
import structlog

from abi_docs.model import (
    Case,
    Docs,
    Field,
    Function,
    Handle,
    Interface,
    ListOf,
    Param,
    Primitive,
    Record,
    Resource,
    TypeDef,
    TypeId,
    Variant,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logging configuration made by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture(scope="session")
def fixtures_path():
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def geometry_path(fixtures_path):
    """Path to the sample interface document."""
    return fixtures_path / "geometry.wit.yaml"


@pytest.fixture
def point_iface():
    """Interface with a single ``Point`` record and no functions."""
    return Interface(
        name="point",
        types=[
            TypeDef(
                kind=Record((Field("x", Primitive.U32), Field("y", Primitive.U32))),
                name="Point",
            ),
        ],
    )


@pytest.fixture
def sample_iface():
    """Interface covering named links, anonymous types, handles and functions.

    Type table:
        0: Point     record {x: u32, y: u32}
        1: Shape     variant {circle: u32, square: Point, empty}
        2: (anon)    list<char>
        3: Label     record {text: list<char>, canvas: handle<canvas>}
        4: (anon)    list<Point>
    """
    return Interface(
        name="sample",
        types=[
            TypeDef(
                kind=Record((
                    Field("x", Primitive.U32, Docs("Horizontal position.")),
                    Field("y", Primitive.U32, Docs("Vertical position.")),
                )),
                name="Point",
                docs=Docs("A point on the plane."),
            ),
            TypeDef(
                kind=Variant((
                    Case("circle", Primitive.U32),
                    Case("square", TypeId(0)),
                    Case("empty"),
                )),
                name="Shape",
            ),
            TypeDef(kind=ListOf(Primitive.CHAR)),
            TypeDef(
                kind=Record((
                    Field("text", TypeId(2)),
                    Field("canvas", Handle(0)),
                )),
                name="Label",
            ),
            TypeDef(kind=ListOf(TypeId(0))),
        ],
        functions=[
            Function(
                name="draw",
                params=(Param("shape", TypeId(1)), Param("at", TypeId(4))),
                results=(Param("drawn", Primitive.U32),),
                docs=Docs("Draw shapes."),
            ),
        ],
        resources=[Resource("canvas")],
    )
