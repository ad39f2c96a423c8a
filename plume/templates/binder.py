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

"""Data binding: attach records and record sets to a block.

``bind(block, data)`` accepts either a mapping or a sequence:

* ``{"Title": "Home"}`` binds a named scalar.
* ``{"user": {"name": "Ann"}}`` is flattened to ``user.name``.
* ``[{"Name": "A"}, {"Name": "B"}]`` appends two rows to the block's
  record set; rendering repeats the block once per row.

Integer keys in a mapping are positional, exactly like list items.  A
block holds either a flat record or a record set; a payload that would
mix the two is rejected before anything is written.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from plume.templates.blocks import Block, ValueKind, classify
from plume.templates.errors import InvalidDataShape

logger = logging.getLogger(__name__)


def flatten(values: Mapping[Any, Any] | Sequence[Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings and lists to dot-notation.

    ``{"foo": {"bar": "baz"}, "tags": ["a"]}`` becomes
    ``{"foo.bar": "baz", "tags.0": "a"}``.  Empty containers vanish.
    """
    items = values.items() if isinstance(values, Mapping) else enumerate(values)
    flat: dict[str, Any] = {}
    for key, value in items:
        path = f"{prefix}.{key}" if prefix else str(key)
        if classify(value) in (ValueKind.RECORD, ValueKind.RECORD_SET):
            flat.update(flatten(value, path))
        else:
            flat[path] = value
    return flat


def _entries(data: Any) -> list[tuple[str | None, Any]]:
    """Normalise *data* into ``(name or None, value)`` pairs."""
    kind = classify(data)
    if kind is ValueKind.RECORD_SET:
        return [(None, value) for value in data]
    if kind is not ValueKind.RECORD:
        raise InvalidDataShape(
            f"Bound data must be a mapping or a list of records, got {type(data).__name__}"
        )
    entries: list[tuple[str | None, Any]] = []
    for name, value in data.items():
        if isinstance(name, bool) or not isinstance(name, (str, int)):
            raise InvalidDataShape(f"Variable names must be strings, got {name!r}")
        entries.append((name if isinstance(name, str) else None, value))
    return entries


def bind(block: Block, data: Any) -> None:
    """Bind *data* to *block*.  All-or-nothing: invalid payloads change nothing."""
    named: dict[str, Any] = {}
    rows: list[dict[str, Any]] = []

    for name, value in _entries(data):
        kind = classify(value)
        if name is None:
            if kind is not ValueKind.RECORD:
                raise InvalidDataShape(
                    f"Record set rows must be records, got {type(value).__name__}"
                )
            rows.append(flatten(value))
        elif kind in (ValueKind.RECORD, ValueKind.RECORD_SET):
            named.update(flatten(value, name))
        else:
            named[name] = value

    if named and rows:
        raise InvalidDataShape("Cannot bind named variables and record set rows together")
    if named and block.is_record_set:
        raise InvalidDataShape("Cannot bind named variables to a block holding a record set")
    if rows and block.variables and not block.is_record_set:
        raise InvalidDataShape("Cannot bind record set rows to a block holding named variables")

    if rows:
        next_index = max(block.variables, default=-1) + 1
        for offset, row in enumerate(rows):
            block.variables[next_index + offset] = row
        logger.debug("Bound %d row(s), record set now has %d", len(rows), len(block.variables))
    else:
        block.variables.update(named)
        logger.debug("Bound %d variable(s)", len(named))
