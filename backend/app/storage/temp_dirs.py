"""
Temporary directories used to stage uploads.

Layout:
    <tmp_root>/
    <tmp_root>/avatar-profile/
    <tmp_root>/tutoring-images/

The paths are computed and created once at startup and are read-only
afterwards, so they are safe to share between concurrent requests.
"""
import logging
import time
from pathlib import Path
from typing import Dict, Iterable, Optional

from app.config import settings
from app.storage.categories import AssetCategory, CATEGORIES

logger = logging.getLogger(__name__)


class TempDirectories:
    """
    Owns the staging directory tree.

    Creating an instance guarantees that the root and one subdirectory per
    category exist. Existing directories are left alone; a permission error
    propagates because the service cannot accept uploads without them.
    """

    def __init__(self, root: Path, categories: Iterable[AssetCategory] = CATEGORIES.values()):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

        self._dirs: Dict[str, Path] = {}
        for category in categories:
            path = self.root / category.staging_dir_name
            path.mkdir(parents=True, exist_ok=True)
            self._dirs[category.name] = path

        logger.info(
            "Temporary directories initialized",
            extra={
                "event": "temp_dirs_ready",
                "root": str(self.root),
                "dirs": {name: str(path) for name, path in self._dirs.items()},
            }
        )

    def for_category(self, category: AssetCategory) -> Path:
        """Staging directory for a category."""
        return self._dirs[category.name]

    @property
    def category_dirs(self) -> Dict[str, Path]:
        return dict(self._dirs)

    def sweep_stale(self, max_age_seconds: int) -> int:
        """
        Remove staging files older than max_age_seconds.

        Staging files only live for one request, so anything this old was
        left behind by a process that died mid-upload.

        Returns:
            Number of files removed
        """
        cutoff = time.time() - max_age_seconds
        removed = 0

        for path in self._dirs.values():
            for entry in list(path.iterdir()):
                if not entry.is_file():
                    continue
                try:
                    if entry.stat().st_mtime < cutoff:
                        entry.unlink(missing_ok=True)
                        removed += 1
                except OSError as e:
                    logger.warning(f"Could not sweep stale staging file {entry}: {e}")

        if removed:
            logger.info(f"Swept {removed} stale staging files", extra={"event": "staging_swept", "removed": removed})
        return removed


# Singleton instance
_temp_dirs: Optional[TempDirectories] = None


def get_temp_directories() -> TempDirectories:
    """
    Get the singleton TempDirectories instance.

    Used as a FastAPI dependency; tests override it with a tmp_path rooted instance.
    """
    global _temp_dirs
    if _temp_dirs is None:
        _temp_dirs = TempDirectories(settings.tmp_root)
    return _temp_dirs
