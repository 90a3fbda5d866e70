"""Recursive file counting.

Counts every regular file reachable from a directory. Symlinked directories
are followed, but each real directory is visited at most once, so symlink
loops terminate and a directory reachable through several links is only
counted once.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def count_files(root: Path) -> int:
    """
    Count regular files below a directory.

    Uses an explicit stack instead of recursion so deep trees cannot hit the
    interpreter recursion limit. Directories are canonicalized only when they
    are popped for visiting.

    Args:
        root: Directory to count

    Returns:
        Number of regular files reachable from root (0 if unreadable)
    """
    count = 0
    pending: list[Path] = [Path(root)]
    visited: set[Path] = set()

    while pending:
        current = pending.pop()

        try:
            real_dir = current.resolve(strict=True)
        except (OSError, RuntimeError):
            # Broken link or symlink loop that resolve() refuses
            continue

        if real_dir in visited:
            continue
        visited.add(real_dir)

        try:
            with os.scandir(real_dir) as entries:
                for entry in entries:
                    try:
                        if entry.is_file():
                            count += 1
                        elif entry.is_dir():
                            pending.append(Path(entry.path))
                    except OSError:
                        continue
        except (PermissionError, OSError) as e:
            logger.debug("Skipping unreadable directory %s: %s", real_dir, e)
            continue

    return count
