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

"""Markup loader with directory fallback.

Resolution order when loading ``loader.load("page.html")``:

1. ``<user_dir>/page.html`` — user's customised version
2. ``<default_dir>/page.html`` — package-shipped default

This lets users override any page template without touching installed
code.  Lookup is delegated to Jinja2's ``FileSystemLoader``; the markup
itself is handed to the block parser, never to Jinja2.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from plume.templates.errors import SourceUnreadable

logger = logging.getLogger(__name__)

MARKUP_SUFFIXES = (".html", ".htm", ".tpl", ".txt")


class TemplateLoader:
    """Read raw template markup from disk.

    Args:
        user_dir: User override directory (checked first).
        default_dir: Package default directory (fallback).
        encoding: Text encoding of the template files.

    With neither directory given, names resolve against the current
    working directory.
    """

    def __init__(
        self,
        user_dir: Path | str | None = None,
        default_dir: Path | str | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self.user_dir = Path(user_dir).expanduser() if user_dir else None
        self.default_dir = Path(default_dir).expanduser() if default_dir else None
        search_path = [d for d in (self.user_dir, self.default_dir) if d is not None]
        self._env = Environment(
            loader=FileSystemLoader(search_path or [Path.cwd()], encoding=encoding),
            keep_trailing_newline=True,
        )

    def load(self, name: str) -> str:
        """Return the raw markup of template *name*.

        Raises :class:`SourceUnreadable` if the template is missing from
        every directory or cannot be decoded.
        """
        try:
            source, filename, _ = self._env.loader.get_source(self._env, name)
        except TemplateNotFound as exc:
            raise SourceUnreadable(name, "not found") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnreadable(name, str(exc)) from exc
        logger.debug("Loaded template source %s (%d chars)", filename, len(source))
        return source

    def has_template(self, name: str) -> bool:
        """Check whether a readable template exists in either directory."""
        try:
            self._env.loader.get_source(self._env, name)
            return True
        except (TemplateNotFound, OSError, UnicodeDecodeError):
            return False

    def install_defaults(self) -> None:
        """Copy all default templates to the user directory.

        Skips templates that already exist in the user directory.
        """
        if self.user_dir is None or self.default_dir is None:
            return
        if not self.default_dir.is_dir():
            return

        self.user_dir.mkdir(parents=True, exist_ok=True)
        for src in self.default_dir.iterdir():
            if src.is_file() and src.suffix in MARKUP_SUFFIXES:
                dest = self.user_dir / src.name
                if not dest.exists():
                    dest.write_text(src.read_text(encoding="utf-8"), encoding="utf-8")
                    logger.info("Installed default template: %s", dest)
