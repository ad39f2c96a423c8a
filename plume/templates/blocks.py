# plume — logic-free block templating for server-side pages
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Block tree: named nodes of template code, child blocks and bound data.

A block is addressed by a colon-delimited path from the root, e.g.
``"Main:Content:Row"``.  The empty address denotes the root itself.

Bound values are inspected by shape at substitution time and fall into
one of the :class:`ValueKind` categories:

* scalars (``str``, numbers, ``bool``, ``None``)
* records (mappings, flattened to dot-notation when bound)
* record sets (sequences of records, driving row iteration)
* callables (invoked with no arguments when substituted)
* renderables (objects exposing ``render() -> str``)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Union, runtime_checkable

from plume.templates.errors import AddressNotFound

ADDRESS_SEPARATOR = ":"

Address = Union[str, Sequence[str]]


@runtime_checkable
class Renderable(Protocol):
    """Anything that can render itself to a string (see :class:`~plume.templates.views.View`)."""

    def render(self) -> str: ...


class ValueKind(Enum):
    SCALAR = "scalar"
    RECORD = "record"
    RECORD_SET = "record_set"
    CALLABLE = "callable"
    RENDERABLE = "renderable"


def classify(value: Any) -> ValueKind:
    """Return the :class:`ValueKind` of a bound value."""
    if isinstance(value, Mapping):
        return ValueKind.RECORD
    if isinstance(value, (str, bytes, bytearray)):
        return ValueKind.SCALAR
    if isinstance(value, Sequence):
        return ValueKind.RECORD_SET
    if callable(value):
        return ValueKind.CALLABLE
    if isinstance(value, Renderable):
        return ValueKind.RENDERABLE
    return ValueKind.SCALAR


@dataclass
class Block:
    """A node of the template tree.

    Attributes:
        code: Template text with child regions replaced by ``{{{Name}}}``.
        children: Child blocks keyed by name.
        variables: Either a flat record (``name -> value``) or a record set
            (``row index -> record``), never a mix.
    """

    code: str = ""
    children: dict[str, Block] = field(default_factory=dict)
    variables: dict[Any, Any] = field(default_factory=dict)

    @property
    def is_record_set(self) -> bool:
        """True if the bound variables are rows rather than a flat record."""
        if not self.variables:
            return False
        first = next(iter(self.variables.values()))
        return classify(first) is ValueKind.RECORD

    def walk(self) -> Iterable[tuple[str, Block]]:
        """Yield ``(address, block)`` for every descendant, depth first."""
        for name, child in self.children.items():
            yield name, child
            for sub_address, sub_block in child.walk():
                yield f"{name}{ADDRESS_SEPARATOR}{sub_address}", sub_block


def split_address(address: Address) -> list[str]:
    """Split an address into its path segments.

    Accepts either a colon-delimited string or an already split sequence.
    Empty segments (``"Main::Row"``) are rejected.
    """
    if isinstance(address, str):
        if not address:
            return []
        segments = address.split(ADDRESS_SEPARATOR)
    else:
        segments = list(address)
    if any(not segment for segment in segments):
        raise AddressNotFound(join_address(segments), "Address contains an empty segment")
    return segments


def join_address(segments: Sequence[str]) -> str:
    return ADDRESS_SEPARATOR.join(segments)


def seek(root: Block, address: Address, *, create: bool = False) -> Block:
    """Locate the block at *address* below *root*.

    With ``create=True`` missing blocks along the path are created empty;
    otherwise a missing block raises :class:`AddressNotFound`.
    """
    segments = split_address(address)
    block = root
    for depth, name in enumerate(segments):
        child = block.children.get(name)
        if child is None:
            if not create:
                raise AddressNotFound(join_address(segments[: depth + 1]))
            child = block.children[name] = Block()
        block = child
    return block


def seek_parent(root: Block, address: Address, *, create: bool = False) -> tuple[Block, str]:
    """Return ``(parent_block, child_name)`` for a non-empty *address*."""
    segments = split_address(address)
    if not segments:
        raise AddressNotFound("", "The root block has no parent")
    parent = seek(root, segments[:-1], create=create)
    return parent, segments[-1]
