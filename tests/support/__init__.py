"""Shared sandbox helpers for tests that need real data directories.

The sandbox lays out two base directories (``base`` then ``home``) and a
development override (``local``) under a temporary path, mirroring the search
order the engine uses in production.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lib_cmdb.domain.settings import Settings


@dataclass
class CmdbSandbox:
    """Temporary directory tree with helpers to write data files."""

    root: Path
    roots: dict[str, Path] = field(default_factory=dict)

    def write(self, location: str, name: str, content: str | Any) -> Path:
        """Write *content* to ``roots[location] / name``.

        Non-string content is serialised according to the file suffix.
        """

        target = self.roots[location] / name
        target.parent.mkdir(parents=True, exist_ok=True)
        if not isinstance(content, str):
            if target.suffix in {".yml", ".yaml"}:
                content = yaml.safe_dump(content)
            else:
                content = json.dumps(content)
        target.write_text(content, encoding="utf-8")
        return target

    @property
    def directories(self) -> tuple[str, ...]:
        return (str(self.roots["base"]), str(self.roots["home"]))

    @property
    def env(self) -> dict[str, str]:
        """Environment variables pointing ``load_settings`` at the sandbox."""

        return {"LIB_CMDB_DIRS": os.pathsep.join(self.directories)}

    def settings(self, **overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "directories": self.directories,
            "local_directory": str(self.roots["local"]),
        }
        values.update(overrides)
        return Settings(**values)


def create_cmdb_sandbox(tmp_path: Path) -> CmdbSandbox:
    """Create the sandbox directories under *tmp_path*."""

    roots = {
        "base": tmp_path / "var" / "lib" / "cmdb",
        "home": tmp_path / "home" / ".cmdb",
        "local": tmp_path / "work" / ".cmdb",
    }
    for path in roots.values():
        path.mkdir(parents=True, exist_ok=True)
    return CmdbSandbox(root=tmp_path, roots=roots)


__all__ = ["CmdbSandbox", "create_cmdb_sandbox"]
