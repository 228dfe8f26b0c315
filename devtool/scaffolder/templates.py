"""Jinja2 template rendering for class and component scaffolding.

Provides the TemplateRenderer class which loads ``.stub`` templates from disk
and renders them with a flat context dictionary.  Templates may pull in other
files verbatim with ``{{ include_file(file="...") }}``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import jinja2
from jinja2 import Environment

from devtool.aliases import AliasResolver
from devtool.errors import (
    IncludePathNotFound,
    TemplateNotFound,
    TemplateSyntaxError,
    WriteError,
)
from devtool.utils import ucfirst

# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 ``.stub`` templates for scaffolding.

    The template to render is located, in order of precedence, by:

    1. an explicitly set full path (``template_file``),
    2. an absolute ``template_path`` passed to :meth:`render`,
    3. ``template_dir / (template_filename + template_ext)``.

    ``last_error`` holds the :class:`WriteError` of the most recent failed
    write, or ``None``.
    """

    def __init__(
        self,
        template_dir: str | Path | None = None,
        template_filename: str = "",
        template_ext: str = ".stub",
        template_file: str | Path | None = None,
        aliases: AliasResolver | None = None,
    ) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.template_ext = "." + template_ext.strip().strip(".")
        self.template_filename = template_filename
        self.template_file = Path(template_file) if template_file else None
        self.aliases = aliases or AliasResolver()
        self.last_error: WriteError | None = None
        self._current: Path | None = None

        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals["include_file"] = self._include_file
        # Register custom filters
        self.env.filters["ucfirst"] = ucfirst
        self.env.filters["escape_namespace"] = _escape_namespace_filter

    @property
    def template_filename(self) -> str:
        return self._template_filename

    @template_filename.setter
    def template_filename(self, value: str) -> None:
        # "command.stub" and "command" name the same template
        if value.endswith(self.template_ext):
            value = value[: -len(self.template_ext)]
        self._template_filename = value

    # -- Path resolution ---------------------------------------------------

    def template_path(self, template_path: str | Path | None = None, check: bool = True) -> Path:
        """Resolve the template file to render.

        Raises:
            TemplateNotFound: If *check* is set and the file does not exist.
        """
        if template_path is None and self.template_file is not None:
            path = self.template_file
        elif template_path is not None and Path(template_path).is_absolute():
            path = Path(template_path)
        else:
            name = str(template_path) if template_path is not None else self.template_filename
            if not name.endswith(self.template_ext):
                name += self.template_ext
            path = self.template_dir / name

        if check and not path.is_file():
            raise TemplateNotFound(str(path))
        return path

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str | Path | None, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Template name relative to the template directory
                (the extension is optional), an absolute path, or ``None`` to
                use the configured template.
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.

        Raises:
            TemplateNotFound: The template file does not exist.
            TemplateSyntaxError: Jinja2 could not parse the template.
            IncludePathNotFound: An ``include_file`` target does not exist.
        """
        path = self.template_path(template_path)
        source = path.read_text(encoding="utf-8")

        previous = self._current
        self._current = path
        try:
            template = self.env.from_string(source)
            return template.render(**context)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateSyntaxError(str(path), exc.message or str(exc), exc.lineno) from exc
        finally:
            self._current = previous

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Relative ``include_file`` paths resolve against the template directory.
        """
        try:
            template = self.env.from_string(template_string)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateSyntaxError("<string>", exc.message or str(exc), exc.lineno) from exc
        return template.render(**context)

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        output_path: str | Path,
        context: dict[str, Any],
        template_path: str | Path | None = None,
    ) -> bool:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.  Template errors
        propagate; a failed write returns ``False`` and is kept on
        ``last_error``.
        """
        content = self.render(template_path, context)
        return await self.write_raw(output_path, content)

    async def write_raw(self, output_path: str | Path, content: str) -> bool:
        """Write *content* verbatim to *output_path*, creating parent dirs."""
        out = Path(output_path)
        try:
            await asyncio.to_thread(_write_file, out, content)
        except OSError as exc:
            self.last_error = WriteError(str(out), exc.strerror or str(exc))
            return False
        self.last_error = None
        return True

    # -- Include directive -------------------------------------------------

    def _include_file(self, file: str = "") -> str:
        """Return the raw content of *file*, preceded by a newline.

        ``@alias/...`` paths go through the alias resolver, ``/...`` paths are
        absolute and anything else is relative to the rendering template.
        """
        if not file:
            return ""

        if file.startswith("@"):
            part = self.aliases.resolve(file)
        elif file.startswith("/"):
            part = Path(file)
        else:
            base = self._current.parent if self._current is not None else self.template_dir
            part = base / file

        if not part.is_file():
            raise IncludePathNotFound(str(part))
        return "\n" + part.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _escape_namespace_filter(value: str) -> str:
    """Double every backslash, for namespaces embedded in JSON."""
    return value.replace("\\", "\\\\")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
