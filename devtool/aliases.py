"""Path alias resolution.

An ``AliasResolver`` maps short ``@name`` prefixes to directories.  It is
passed explicitly to the components that need it (the template renderer for
``include_file`` and the code generator for output directories).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from devtool.errors import UnknownAlias


class AliasResolver:
    """Resolve ``@alias/rest/of/path`` strings against registered directories.

    Paths without a leading ``@`` are returned as-is when absolute and joined
    onto ``base_dir`` when relative.
    """

    def __init__(
        self,
        aliases: Mapping[str, str | Path] | None = None,
        base_dir: str | Path | None = None,
    ) -> None:
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self._aliases: dict[str, Path] = {}
        for name, target in (aliases or {}).items():
            self.register(name, target)

    def register(self, name: str, target: str | Path) -> None:
        """Register (or replace) an alias.  The leading ``@`` is optional."""
        key = name if name.startswith("@") else f"@{name}"
        self._aliases[key] = Path(target)

    def has(self, name: str) -> bool:
        key = name if name.startswith("@") else f"@{name}"
        return key in self._aliases

    def resolve(self, path: str | Path) -> Path:
        """Return the concrete path for *path*.

        Raises:
            UnknownAlias: If *path* starts with an unregistered ``@alias``.
        """
        raw = str(path)
        if raw.startswith("@"):
            alias, _, rest = raw.partition("/")
            if alias not in self._aliases:
                raise UnknownAlias(alias)
            target = self._aliases[alias]
            return target / rest if rest else target

        resolved = Path(raw)
        if resolved.is_absolute():
            return resolved
        return self.base_dir / resolved
