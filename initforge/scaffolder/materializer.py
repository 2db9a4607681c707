"""Writes rendered artifacts to disk.

Every generation request is materialized through a private staging directory
next to the target and only moved into place once every file has been
written, so a failed request never leaves a half-written project behind.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import stat
import tempfile
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from initforge.models import Manifest, RenderedFile


class MaterializationError(Exception):
    """Raised when rendered files cannot be written to the target directory."""

    def __init__(self, message: str, path: str | Path = "") -> None:
        self.path = str(path)
        super().__init__(message)


class ProjectMaterializer:
    """Writes an ordered sequence of ``RenderedFile`` into a directory tree.

    The target may already exist; files already present with identical bytes
    are accepted, anything else at a rendered path is a conflict.  Unrelated
    files in the target are left alone.
    """

    async def materialize(
        self, target_dir: str | Path, files: Iterable[RenderedFile]
    ) -> Manifest:
        """Write *files* under *target_dir* and return the manifest.

        Args:
            target_dir: Project root.  Created (with parents) if missing.
            files: Rendered artifacts, written in the given order.

        Returns:
            The ``Manifest`` describing every written file.

        Raises:
            MaterializationError: On conflicting files, duplicate paths or any
                I/O failure.  Nothing is retried.
        """
        file_list = list(files)
        target = Path(target_dir)
        await asyncio.to_thread(self._materialize, target, file_list)
        return Manifest.from_files(target, file_list)

    # -- Internals ---------------------------------------------------------

    def _materialize(self, target: Path, files: list[RenderedFile]) -> None:
        _check_duplicates(files)
        _check_conflicts(target, files)

        parent = target.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{target.name}-", dir=parent))
        except OSError as exc:
            raise MaterializationError(
                f"Cannot prepare output directory {parent}: {exc}", path=parent
            ) from exc

        try:
            for rendered in files:
                _write_file(staging, rendered)
            staging.chmod(0o755)
            _commit(staging, target, files)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _local_path(root: Path, rendered: RenderedFile) -> Path:
    return root.joinpath(*PurePosixPath(rendered.path).parts)


def _check_duplicates(files: list[RenderedFile]) -> None:
    seen: set[str] = set()
    for rendered in files:
        if rendered.path in seen:
            raise MaterializationError(
                f"Duplicate output path: {rendered.path}", path=rendered.path
            )
        seen.add(rendered.path)


def _check_conflicts(target: Path, files: list[RenderedFile]) -> None:
    """Refuse to overwrite existing content that differs from the rendered bytes."""
    if target.exists() and not target.is_dir():
        raise MaterializationError(f"Target is not a directory: {target}", path=target)
    if not target.exists():
        return

    conflicts: list[str] = []
    for rendered in files:
        blocked = _file_in_parents(target, rendered)
        if blocked is not None:
            conflicts.append(blocked)
            continue
        dest = _local_path(target, rendered)
        if not dest.exists():
            continue
        try:
            if dest.is_dir() or dest.read_bytes() != rendered.content:
                conflicts.append(rendered.path)
        except OSError as exc:
            raise MaterializationError(
                f"Cannot read existing file {dest}: {exc}", path=dest
            ) from exc

    if conflicts:
        raise MaterializationError(
            f"Target {target} already contains different content at: "
            + ", ".join(dict.fromkeys(conflicts)),
            path=target,
        )


def _file_in_parents(target: Path, rendered: RenderedFile) -> str | None:
    """Return the first parent of *rendered* that exists in *target* as a file."""
    for parent in reversed(PurePosixPath(rendered.path).parents[:-1]):
        if target.joinpath(*parent.parts).is_file():
            return parent.as_posix()
    return None


def _write_file(root: Path, rendered: RenderedFile) -> None:
    """Create parent dirs, write bytes, and set the executable bit if needed."""
    dest = _local_path(root, rendered)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(rendered.content)
        if rendered.executable:
            _make_executable(dest)
    except OSError as exc:
        raise MaterializationError(
            f"Failed to write {rendered.path}: {exc}", path=rendered.path
        ) from exc


def _make_executable(path: Path) -> None:
    """Set the executable bit on a file."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _commit(staging: Path, target: Path, files: list[RenderedFile]) -> None:
    """Move staged files into *target*.

    An absent or empty target is replaced by the staging directory in a single
    rename; otherwise each file is moved over individually.
    """
    try:
        if target.is_dir() and not any(target.iterdir()):
            target.rmdir()
        if not target.exists():
            staging.rename(target)
            return

        for rendered in files:
            src = _local_path(staging, rendered)
            dest = _local_path(target, rendered)
            dest.parent.mkdir(parents=True, exist_ok=True)
            os.replace(src, dest)
    except OSError as exc:
        raise MaterializationError(
            f"Failed to move generated files into {target}: {exc}", path=target
        ) from exc
