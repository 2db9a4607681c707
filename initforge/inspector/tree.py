"""Read-only snapshot of a project directory."""

from __future__ import annotations

import stat
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


class NotFound(Exception):
    """Raised when a queried file, directory or build-file field is absent."""

    def __init__(self, message: str, path: str | Path = "") -> None:
        self.path = str(path)
        super().__init__(message)


@dataclass(frozen=True, eq=False)
class ProjectTree:
    """Immutable index of a project: relative posix path -> file bytes.

    The tree is read once by :meth:`load`; later queries never touch the
    filesystem, so they see a consistent snapshot.
    """

    root: Path
    files: Mapping[str, bytes] = field(default_factory=lambda: MappingProxyType({}))
    executables: frozenset[str] = frozenset()

    @classmethod
    def load(cls, root: str | Path) -> "ProjectTree":
        """Index every regular file under *root*.

        Raises:
            NotFound: If *root* does not exist or is not a directory.
        """
        root_path = Path(root)
        if not root_path.is_dir():
            raise NotFound(f"Project directory not found: {root_path}", path=root_path)

        files: dict[str, bytes] = {}
        executables: set[str] = set()
        for path in sorted(root_path.rglob("*")):
            if not path.is_file():
                continue
            rel = path.relative_to(root_path).as_posix()
            files[rel] = path.read_bytes()
            if path.stat().st_mode & stat.S_IXUSR:
                executables.add(rel)

        return cls(
            root=root_path,
            files=MappingProxyType(files),
            executables=frozenset(executables),
        )

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and path in self.files

    def read_bytes(self, path: str) -> bytes:
        try:
            return self.files[path]
        except KeyError:
            raise NotFound(f"No such file in {self.root}: {path}", path=path) from None

    def read_text(self, path: str) -> str:
        return self.read_bytes(path).decode("utf-8")

    def paths(self) -> list[str]:
        return sorted(self.files)
