"""
File-system helpers shared across the pipeline.

Blocking calls (disk, PyMuPDF, Pillow, boto3) are pushed to the default
executor through `run_blocking` so that each of them is a suspension point
for the event loop.
"""

from __future__ import annotations

import asyncio
import math
import shutil
from functools import partial
from pathlib import Path
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking callable in the default thread pool executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


def ensure_parent(path: str | Path) -> None:
    """
    Ensure that the parent directory for the given path exists.

    Args:
      path: Target file path whose parent should be created.
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def copy_file(src: str | Path, dst: str | Path) -> Path:
    """
    Copy a single file from `src` to `dst`.

    Ensures the parent of `dst` exists and returns the destination as a
    `Path` object.
    """
    ensure_parent(dst)
    shutil.copyfile(str(src), str(dst))
    return Path(dst)


def read_bytes(path: str | Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def file_size(path: str | Path) -> int:
    return Path(path).stat().st_size


def format_bytes(size: int) -> str:
    """
    Human-readable byte size.

    Example:
        >>> format_bytes(2 * 1024 * 1024)
        '2 MB'
    """
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    idx = min(int(math.log(size, 1024)), len(units) - 1)
    value = round(size / (1024**idx), 2)
    return f"{value:g} {units[idx]}"
