"""HTML renderers backed by Jinja templates."""

from __future__ import annotations

import abc
import dataclasses
import fnmatch
import glob
import os
from collections.abc import Mapping
from typing import Any, Callable, Optional

import jinja2

from spritz.fs import TemplateFileSystem
from spritz.render.base import HTML_CONTENT_TYPE, Render, write_content_type

_GLOB_MAGIC = "*?["


@dataclasses.dataclass(frozen=True)
class Delims:
    """Left and right delimiters of template expressions."""

    left: str = "{{"
    right: str = "}}"


class HTMLRender(abc.ABC):
    """Produces HTML renders for a template name and its data."""

    @abc.abstractmethod
    def instance(self, name: str, data: Any) -> "HTML":
        """An HTML render of template ``name`` with ``data``."""


def _environment(
    delims: Delims, func_map: Optional[Mapping[str, Callable]], templates: dict[str, str]
) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.DictLoader(templates),
        autoescape=True,
        keep_trailing_newline=True,
        variable_start_string=delims.left or "{{",
        variable_end_string=delims.right or "}}",
    )
    if func_map:
        env.filters.update(func_map)
        env.globals.update(func_map)
    return env


def _read(handle: Any) -> str:
    try:
        content = handle.read()
    finally:
        close = getattr(handle, "close", None)
        if callable(close):
            close()
    if isinstance(content, (bytes, bytearray)):
        return bytes(content).decode("utf-8")
    return content


def _no_match(pattern: str) -> FileNotFoundError:
    return FileNotFoundError(f"template: pattern matches no files: {pattern!r}")


def _fs_glob(file_system: TemplateFileSystem, pattern: str) -> list[str]:
    """Names in ``file_system`` matching ``pattern``; only the last element may be a wildcard."""
    if not any(ch in pattern for ch in _GLOB_MAGIC):
        return [pattern]
    folder, _, base = pattern.rpartition("/")
    handle = file_system.open(folder or ".")
    try:
        entries = handle.readdir(0) or []
    finally:
        close = getattr(handle, "close", None)
        if callable(close):
            close()
    return sorted(
        f"{folder}/{entry}" if folder else entry
        for entry in entries
        if fnmatch.fnmatchcase(entry, base)
    )


def _context(data: Any) -> dict[str, Any]:
    """Template variables: a mapping's items, otherwise the value as ``data``."""
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return {str(key): value for key, value in data.items()}
    return {"data": data}


@dataclasses.dataclass
class HTML(Render):
    """A template, the name of the template to run in it, and its data.

    ``template`` is either a Jinja environment holding named templates or a
    single Jinja template.
    """

    template: Any
    name: str = ""
    data: Any = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        w.write(self._execute().encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, HTML_CONTENT_TYPE)

    def _execute(self) -> str:
        context = _context(self.data)
        template = self.template
        if isinstance(template, jinja2.Environment):
            if not self.name:
                raise ValueError("template: a template name is required to execute a template set")
            return template.get_template(self.name).render(context)
        if self.name and template.name != self.name:
            raise jinja2.TemplateNotFound(self.name)
        return template.render(context)


@dataclasses.dataclass
class HTMLProduction(HTMLRender):
    """Renders with templates loaded once."""

    template: Any
    delims: Delims = dataclasses.field(default_factory=Delims)

    def instance(self, name: str, data: Any) -> HTML:
        return HTML(template=self.template, name=name, data=data)


@dataclasses.dataclass
class HTMLDebug(HTMLRender):
    """Renders with templates reloaded from their source on every instance."""

    files: list[str] = dataclasses.field(default_factory=list)
    glob: str = ""
    file_system: Any = None
    patterns: list[str] = dataclasses.field(default_factory=list)
    delims: Delims = dataclasses.field(default_factory=Delims)
    func_map: Optional[dict[str, Callable]] = None

    def instance(self, name: str, data: Any) -> HTML:
        return HTML(template=self._load_template(), name=name, data=data)

    def _load_template(self) -> jinja2.Environment:
        func_map = self.func_map or {}
        if self.files:
            return _environment(self.delims, func_map, self._from_paths(self.files))
        if self.glob:
            paths = sorted(glob.glob(self.glob))
            if not paths:
                raise _no_match(self.glob)
            return _environment(self.delims, func_map, self._from_paths(paths))
        if self.file_system is not None and self.patterns:
            return _environment(self.delims, func_map, self._from_file_system())
        raise ValueError(
            "the HTML debug render was created without files or glob pattern "
            "or file system with patterns"
        )

    @staticmethod
    def _from_paths(paths: list[str]) -> dict[str, str]:
        templates: dict[str, str] = {}
        for path in paths:
            with open(path, encoding="utf-8") as handle:
                templates[os.path.basename(path)] = handle.read()
        return templates

    def _from_file_system(self) -> dict[str, str]:
        file_system = TemplateFileSystem(self.file_system)
        templates: dict[str, str] = {}
        for pattern in self.patterns:
            names = _fs_glob(file_system, pattern)
            if not names:
                raise _no_match(pattern)
            for name in names:
                templates[name.rpartition("/")[2]] = _read(file_system.open(name))
        return templates