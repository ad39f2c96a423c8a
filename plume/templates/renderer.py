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

"""Multi-pass renderer.

Rendering a block runs these passes, strictly in order:

1. Resolve the block depth first.  Bound variables are substituted into
   its code (once per row for a record set) and every child block is
   rendered and inlined at its ``{{{Child}}}`` placeholder.
2. Fold ``{{`literal`|masks}}`` expressions into hidden root variables.
3. Substitute the root block's variables across the whole output, then
   drop the hidden literal variables again.
4. Strip placeholders that never received a value (optional).
5. Strip HTML comments, except ``<!--@ annotated -->`` ones (optional).
6. Decode the quote sentinels added at load time.
7. Run the registered post-processors.
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Mapping
from functools import lru_cache
from html import escape as html_escape
from typing import Any

from plume.templates import codec
from plume.templates.binder import bind
from plume.templates.blocks import Address, Block, Renderable, ValueKind, classify, seek
from plume.templates.masks import MaskRegistry

logger = logging.getLogger(__name__)

# Synthetic fields injected into every row of a record set
ROW_NUMBER = "templateRowNum"
ROW_FIRST = "templateRowFirst"
ROW_LAST = "templateRowLast"
ROW_ODD = "templateRowOdd"
ROW_EVEN = "templateRowEven"

MASK_CHAIN = r"(?:\|([\w|]+))?"

UNUSED_PLACEHOLDER_PATTERN = re.compile(
    r"\{\{\{[\w.]+" + MASK_CHAIN + r"\}\}\}|\{\{[\w.]+" + MASK_CHAIN + r"\}\}"
)
COMMENT_PATTERN = re.compile(r"<!--(?!@).*?-->", re.DOTALL)
LITERAL_PATTERN = re.compile(r"\{\{`([^`]+)`" + MASK_CHAIN + r"\}\}")


@lru_cache(maxsize=1024)
def raw_placeholder(name: str) -> re.Pattern[str]:
    """``{{{name}}}`` or ``{{{name|mask|...}}}``."""
    return re.compile(r"\{\{\{" + re.escape(name) + MASK_CHAIN + r"\}\}\}")


@lru_cache(maxsize=1024)
def escaped_placeholder(name: str) -> re.Pattern[str]:
    """``{{name}}`` or ``{{name|mask|...}}``.

    Also matches inside a stray brace (``{a: {{name}}}``).  Callers replace
    the raw form first so a real ``{{{name}}}`` never reaches this pattern.
    """
    return re.compile(r"\{\{" + re.escape(name) + MASK_CHAIN + r"\}\}")


def mask_names(match: re.Match[str]) -> list[str]:
    chain = match.group(1)
    if not chain:
        return []
    return [name for name in chain.split("|") if name]


def format_value(value: Any) -> str:
    """Stringify a substituted value: ``None``/``False`` -> ``""``, ``True`` -> ``"1"``."""
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


def resolve_value(value: Any) -> Any:
    """Call callables, then render renderables."""
    if classify(value) is ValueKind.CALLABLE:
        value = value()
    if isinstance(value, Renderable) and not isinstance(value, type):
        value = value.render()
    return value


def substitute_names(code: str, variables: Mapping[Any, Any], masks: MaskRegistry) -> str:
    """Replace raw and escaped placeholders for every bound name in *code*.

    Raw placeholders get the value as-is; escaped placeholders get the
    HTML-escaped value.  Mask chains run after escaping, left to right.
    A value is only resolved if its placeholder actually occurs.  Quote
    sentinels inside a value are written as character references, so
    data can never decode into markup quotes.
    """
    for name, value in variables.items():
        raw = raw_placeholder(str(name))
        escaped = escaped_placeholder(str(name))
        if raw.search(code) is None and escaped.search(code) is None:
            continue

        resolved = resolve_value(value)
        code = raw.sub(
            lambda m: codec.protect(format_value(masks.apply_chain(mask_names(m), resolved))),
            code,
        )
        safe = html_escape(format_value(resolved))
        code = escaped.sub(
            lambda m: codec.protect(format_value(masks.apply_chain(mask_names(m), safe))),
            code,
        )
    return code


def literal_name(literal: str) -> str:
    """Deterministic hidden variable name for a literal expression."""
    return hashlib.sha256(literal.encode("utf-8")).hexdigest()


class Renderer:
    """Render blocks of one tree against one mask registry.

    Args:
        root: Root block of the tree.
        masks: Masks and post-processors to apply.
        remove_unused_names: Strip placeholders left without a value.
        remove_html_comments: Strip non-annotated HTML comments.
    """

    def __init__(
        self,
        root: Block,
        masks: MaskRegistry,
        *,
        remove_unused_names: bool = True,
        remove_html_comments: bool = True,
    ) -> None:
        self.root = root
        self.masks = masks
        self.remove_unused_names = remove_unused_names
        self.remove_html_comments = remove_html_comments

    def render(self, address: Address) -> str:
        block = seek(self.root, address)
        value = self.resolve_block(block)
        value, literals = self.fold_literals(value)

        try:
            if self.root.variables and not self.root.is_record_set:
                value = substitute_names(value, self.root.variables, self.masks)
        finally:
            for name in literals:
                self.root.variables.pop(name, None)

        if self.remove_unused_names:
            value = UNUSED_PLACEHOLDER_PATTERN.sub("", value)
        if self.remove_html_comments:
            value = COMMENT_PATTERN.sub("", value)

        value = codec.decode(value)
        return self.masks.run_processors(value)

    def resolve_block(self, block: Block) -> str:
        """Substitute a block's own variables, then inline its children."""
        if not block.variables:
            value = block.code
        elif block.is_record_set:
            value = "".join(self._render_rows(block))
        else:
            value = substitute_names(block.code, block.variables, self.masks)

        for name, child in block.children.items():
            pattern = raw_placeholder(name)
            if pattern.search(value) is None:
                continue
            child_value = self.resolve_block(child)
            value = pattern.sub(
                lambda m: format_value(self.masks.apply_chain(mask_names(m), child_value)),
                value,
            )
        return value

    def _render_rows(self, block: Block) -> list[str]:
        count = len(block.variables)
        rows = []
        for index, record in enumerate(block.variables.values()):
            row = dict(record)
            row[ROW_NUMBER] = index + 1
            row[ROW_FIRST] = index == 0
            row[ROW_LAST] = index == count - 1
            row[ROW_ODD] = index % 2 == 1
            row[ROW_EVEN] = index % 2 == 0
            rows.append(substitute_names(block.code, row, self.masks))
        return rows

    def fold_literals(self, value: str) -> tuple[str, list[str]]:
        """Rewrite ``{{`text`|masks}}`` as a placeholder for a hidden root variable.

        Returns the rewritten text and the hidden names bound at the root.
        The literal is bound decoded, so it is escaped like any bound value.
        """
        names: list[str] = []

        def _fold(match: re.Match[str]) -> str:
            literal, chain = codec.decode(match.group(1)), match.group(2)
            name = literal_name(literal)
            if name not in self.root.variables:
                bind(self.root, {name: literal})
                names.append(name)
            if chain:
                return "{{%s|%s}}" % (name, chain)
            return "{{%s}}" % name

        return LITERAL_PATTERN.sub(_fold, value), names
