"""
Local staging of uploaded files.

An upload is copied to <staging_dir>/<epoch-ms>-<random><ext>, read back
into memory for the object store, and removed before the request ends.
"""
import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from app.storage.categories import AssetCategory
from app.storage.validation import validate_size, raise_for_rejection
from app.utils.logging import log_staging_cleanup_failed
from app.utils.metrics import staging_cleanup_failures_total

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass
class StagedFile:
    """An upload copied to the staging directory."""
    path: Path
    original_name: str
    mime_type: str
    size: int
    cleaned: bool = False


def generate_staging_name(original_name: Optional[str]) -> str:
    """
    Build a collision-resistant staging file name.

    Combines the current time in milliseconds with a random component and
    keeps the extension of the original name.
    """
    suffix = Path(original_name or "").suffix
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"


async def stage_upload(
    file: UploadFile,
    staging_dir: Path,
    max_size: int,
    category: AssetCategory
) -> StagedFile:
    """
    Copy an upload to the staging directory in chunks.

    The copy stops as soon as max_size is crossed, the partial file is
    removed and a 413 is raised.
    """
    path = staging_dir / generate_staging_name(file.filename)
    size = 0

    try:
        async with aiofiles.open(path, "wb") as f:
            while chunk := await file.read(CHUNK_SIZE):
                size += len(chunk)
                raise_for_rejection(validate_size(size, max_size))
                await f.write(chunk)
    except BaseException:
        await remove_staged_file(path, category)
        raise

    return StagedFile(
        path=path,
        original_name=file.filename or path.name,
        mime_type=file.content_type or "application/octet-stream",
        size=size,
    )


async def read_staged_file(staged: StagedFile) -> bytes:
    """Read a staged file back into memory."""
    async with aiofiles.open(staged.path, "rb") as f:
        return await f.read()


async def remove_staged_file(path: Optional[Path], category: AssetCategory) -> bool:
    """
    Remove a staging file, best effort.

    A missing path or an already removed file counts as success. Any other
    failure is logged and counted, never raised.
    """
    if path is None:
        return True

    try:
        await _unlink(path)
        return True
    except OSError as e:
        staging_cleanup_failures_total.labels(category=category.name).inc()
        log_staging_cleanup_failed(logger, category=category.name, staging_path=str(path), error=str(e))
        return False


async def discard_staged_file(staged: Optional[StagedFile], category: AssetCategory) -> bool:
    """Remove a staged file once; later calls for the same file do nothing."""
    if staged is None or staged.cleaned:
        return True

    staged.cleaned = True
    return await remove_staged_file(staged.path, category)


async def _unlink(path: Path) -> None:
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        pass
