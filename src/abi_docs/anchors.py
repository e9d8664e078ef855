"""
Anchor naming and the per-pass anchor registry.

Anchors are derived from names alone, so any document can predict the
anchor of a type (``#point``) or member (``#point.x``) without consulting
the registry. The registry records what one render pass produced and is
written out as the hrefs map.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator

_SEPARATORS = re.compile(r"[\W_]+")


def _split_case(word: str) -> Iterator[str]:
    """Split where a capital follows a non-capital, or ends an acronym.

    ``u8Field`` -> ``u8``, ``Field``; ``HTTPServer`` -> ``HTTP``, ``Server``.
    """
    start = 0
    for i in range(1, len(word)):
        prev, cur, nxt = word[i - 1], word[i], word[i + 1 : i + 2]
        if cur.isupper() and (not prev.isupper() or nxt.islower()):
            yield word[start:i]
            start = i
    yield word[start:]


def to_snake_case(name: str) -> str:
    """Convert an identifier to lowercase words joined by ``_``.

    Word boundaries are non-word characters, ``_`` and case changes, so
    ``my-record``, ``MyRecord`` and ``my_record`` all become ``my_record``.
    """
    words = (w for chunk in _SEPARATORS.split(name) for w in _split_case(chunk))
    return "_".join(w.lower() for w in words if w)


def anchor_name(name: str, member: str | None = None) -> str:
    """Anchor for a named entity or one of its members (without ``#``)."""
    if member is None:
        return to_snake_case(name)
    return f"{to_snake_case(name)}.{to_snake_case(member)}"


def anchor_tag(anchor: str) -> str:
    return f'<a href="#{anchor}" name="{anchor}"></a>'


def member_key(name: str, member: str) -> str:
    return f"{name}::{member}"


@dataclass
class AnchorRegistry:
    """Logical name -> ``#anchor`` map accumulated during one render pass.

    Keys are either a bare entity name or ``Name::member``. The registry is
    append-only; it is an output of rendering, never consulted by it.
    """

    hrefs: dict[str, str] = field(default_factory=dict)

    def register(self, name: str, member: str | None = None) -> str:
        """Record the anchor for ``name`` (or ``name::member``) and return it."""
        anchor = anchor_name(name, member)
        key = name if member is None else member_key(name, member)
        self.hrefs[key] = f"#{anchor}"
        return anchor

    def __contains__(self, key: str) -> bool:
        return key in self.hrefs

    def __getitem__(self, key: str) -> str:
        return self.hrefs[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.hrefs)

    def __len__(self) -> int:
        return len(self.hrefs)

    def to_dict(self) -> dict[str, str]:
        return dict(self.hrefs)
