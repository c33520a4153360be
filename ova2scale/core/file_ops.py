# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/core/file_ops.py
"""
File operation helpers for the staging area.

Atomic descriptor rewrites (temp file + rename in the same directory) and
chunked disk copies that never leave a partial destination behind.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, Optional

DEFAULT_CHUNK_SIZE = 4 * 1024 * 1024

ProgressCallback = Callable[[int], None]


@contextmanager
def atomic_write(
    target_path: Path,
    *,
    suffix: str = ".tmp",
) -> Generator[Path, None, None]:
    """
    Context manager for atomic file writes using temporary file + rename.

    The temporary file lives next to ``target_path`` so the final
    ``os.replace`` is a same-filesystem rename. On any exception the
    temporary file is removed and ``target_path`` is left untouched.

    Example:
        with atomic_write(Path("/data/vms/scale/web01/web01.xml")) as tmp:
            tmp.write_bytes(data)
        # web01.xml is now either the old or the new content, never partial
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        suffix=suffix,
        prefix=f".{target_path.name}.",
        dir=str(target_path.parent),
    )
    os.close(fd)  # caller opens temp_path itself
    temp_path = Path(temp_name)

    try:
        yield temp_path
        # mkstemp creates 0600; the replacement keeps the target's mode.
        if target_path.exists():
            shutil.copymode(target_path, temp_path)
        else:
            os.chmod(temp_path, 0o644)
        os.replace(temp_path, target_path)
    except BaseException:
        safe_unlink(temp_path)
        raise


def safe_unlink(path: Path, missing_ok: bool = True) -> None:
    """Delete a file; a missing file is only an error when missing_ok=False."""
    try:
        Path(path).unlink()
    except FileNotFoundError:
        if not missing_ok:
            raise


def ensure_parent_dir(path: Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def copy_file_chunked(
    src: Path,
    dst: Path,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_progress: Optional[ProgressCallback] = None,
) -> int:
    """
    Byte-for-byte copy of ``src`` to ``dst``, creating parent directories.

    If the copy fails after ``dst`` was opened, ``dst`` is removed before
    the exception propagates.

    Returns:
        Number of bytes written.
    """
    src = Path(src)
    dst = Path(dst)
    ensure_parent_dir(dst)

    written = 0
    with open(src, "rb") as fin:
        try:
            with open(dst, "wb") as fout:
                while True:
                    buf = fin.read(chunk_size)
                    if not buf:
                        break
                    fout.write(buf)
                    written += len(buf)
                    if on_progress is not None:
                        on_progress(len(buf))
        except BaseException:
            safe_unlink(dst)
            raise
    return written
