"""Filesystem utility helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, Iterator


def ensure_dir(path: str | Path) -> None:
    os.makedirs(path, exist_ok=True)


def write_text_atomic(path: str | Path, content: str, encoding: str = "utf-8") -> None:
    """Write ``content`` to a sibling temp file, then replace ``path`` with it.

    Readers never observe a half-written file. The temp file is removed if the
    write fails. No byte-order mark is emitted.
    """
    target = Path(path)
    ensure_dir(target.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as fh:
            fh.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def read_text(path: str | Path, encoding: str = "utf-8-sig") -> str:
    with open(path, "r", encoding=encoding) as fh:
        return fh.read()


def iter_files(
    root: str | Path, suffix: str, excluded_dirs: Iterable[str] = ()
) -> Iterator[Path]:
    """Yield files under ``root`` ending in ``suffix``, in sorted walk order.

    Directories whose name matches an entry of ``excluded_dirs``
    (case-insensitive, whole segment) are not descended into. Walk errors
    propagate to the caller.
    """
    skip = {d.lower() for d in excluded_dirs}
    suffix = suffix.lower()

    def _raise(err: OSError) -> None:
        raise err

    for current, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = sorted(d for d in dirnames if d.lower() not in skip)
        for name in sorted(filenames):
            if name.lower().endswith(suffix):
                yield Path(current) / name
