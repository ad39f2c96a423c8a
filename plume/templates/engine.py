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

"""Logic-free block template engine.

Usage::

    from plume.templates import Template

    template = Template(default_dir=Path(__file__).parent / "pages")
    template.load_template("people.html", "Main")
    template.assign({"Title": "People"}, "Main")
    template.assign([{"Name": "Ann"}, {"Name": "Bob"}], "Main:Row")
    html = template.render("Main")

Each engine owns its block tree and its masks and processors, so
independent engines never see each other's state.  An engine is not
thread-safe; use one per thread or request.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from plume.templates import codec
from plume.templates.binder import bind
from plume.templates.blocks import Address, Block, join_address, seek, seek_parent, split_address
from plume.templates.errors import AddressNotFound
from plume.templates.loader import TemplateLoader
from plume.templates.masks import MaskRegistry
from plume.templates.parser import parse_blocks
from plume.templates.renderer import Renderer

logger = logging.getLogger(__name__)


class Template:
    """Load markup into a block tree, bind data to it and render it.

    Args:
        user_dir: User override directory for :meth:`load_template`.
        default_dir: Package default directory (fallback).
        remove_html_comments: Strip HTML comments from rendered output,
            except those opened with ``<!--@``.
        remove_unused_names: Strip ``{{placeholders}}`` that received no value.
    """

    def __init__(
        self,
        user_dir: Path | str | None = None,
        default_dir: Path | str | None = None,
        *,
        remove_html_comments: bool = True,
        remove_unused_names: bool = True,
    ) -> None:
        self.loader = TemplateLoader(user_dir, default_dir)
        self.remove_html_comments = remove_html_comments
        self.remove_unused_names = remove_unused_names
        self.root = Block()
        self.masks = MaskRegistry()

    # --- Loading ---

    def load_template(
        self, name: str, address: Address, child_address: Address | None = None,
    ) -> Address:
        """Load template file *name* (or one block inside it) into *address*.

        Raises :class:`~plume.templates.errors.SourceUnreadable` if the
        file cannot be read.
        """
        return self.load_from_string(self.loader.load(name), address, child_address)

    def load_from_string(
        self, markup: str, address: Address, child_address: Address | None = None,
    ) -> Address:
        """Parse *markup* and attach it to the tree at *address*.

        Missing blocks on the way to *address* are created.  With
        *child_address*, only that block of the parsed markup is kept,
        e.g. ``"Table:Row"``.  Returns *address*.
        """
        new_block = parse_blocks(codec.encode(markup))
        if child_address:
            new_block = seek(new_block, child_address)

        segments = split_address(address)
        if segments:
            parent = seek(self.root, segments[:-1], create=True)
            parent.children[segments[-1]] = new_block
        else:
            self.root.code = new_block.code
            self.root.children = new_block.children

        logger.debug(
            "Loaded block %r with %d descendant(s)",
            address, sum(1 for _ in new_block.walk()),
        )
        return address

    def has_template(self, name: str) -> bool:
        return self.loader.has_template(name)

    def install_defaults(self) -> None:
        self.loader.install_defaults()

    # --- Data ---

    def assign(self, data: Any, address: Address = "", *, create: bool = False) -> None:
        """Bind *data* to the block at *address* (the root by default).

        A mapping binds named variables (nested mappings flatten to
        ``outer.inner``); a list of mappings binds a record set, which
        repeats the block once per row.  With ``create=True`` a missing
        block is created instead of raising
        :class:`~plume.templates.errors.AddressNotFound`.
        """
        bind(seek(self.root, address, create=create), data)

    def remove_block(self, address: Address) -> None:
        """Detach the block at *address* together with its subtree."""
        parent, name = seek_parent(self.root, address)
        if name not in parent.children:
            raise AddressNotFound(join_address(split_address(address)))
        del parent.children[name]

    def remove_variable(self, address: Address, name: str | int | None = None) -> None:
        """Remove variable *name* from the block at *address*, or all of them."""
        target = seek(self.root, address)
        if name is None:
            target.variables.clear()
        else:
            target.variables.pop(name, None)

    # --- Masks and processors ---

    def register_mask(self, name: str, callback: Callable[..., Any], *params: Any) -> None:
        """Register mask *name*; extra *params* are passed after the value."""
        self.masks.register_mask(name, callback, *params)

    def register_processor(self, callback: Callable[[str], str]) -> None:
        """Append a post-processor run on the final rendered output."""
        self.masks.register_processor(callback)

    # --- Rendering ---

    def render(self, address: Address = "") -> str:
        """Render the block at *address* to its final string."""
        renderer = Renderer(
            self.root,
            self.masks,
            remove_unused_names=self.remove_unused_names,
            remove_html_comments=self.remove_html_comments,
        )
        output = renderer.render(address)
        logger.debug("Rendered %r (%d chars)", address, len(output))
        return output

    def addresses(self) -> list[str]:
        """Return the addresses of all blocks in the tree, depth first."""
        return [address for address, _ in self.root.walk()]


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------
_global_template: Template | None = None
_template_lock = threading.Lock()


def get_template() -> Template:
    """Return the process-wide :class:`Template` (created on first call)."""
    global _global_template
    with _template_lock:
        if _global_template is None:
            _global_template = Template()
        return _global_template


def reset_template() -> None:
    """Replace the process-wide :class:`Template` with a fresh instance."""
    global _global_template
    with _template_lock:
        _global_template = Template()
