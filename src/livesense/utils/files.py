"""File deletion helpers that report instead of raising."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from livesense.domain.models import DeleteResult

logger = logging.getLogger(__name__)


def remove_file(path: Path | str, missing_ok: bool = False) -> DeleteResult:
    """Delete ``path`` and describe what happened.

    Never raises for filesystem errors; the caller decides whether a
    failed deletion is worth logging. With ``missing_ok`` a file that
    does not exist counts as successfully removed.
    """
    path = Path(path)
    try:
        os.unlink(path)
    except FileNotFoundError as e:
        if missing_ok:
            return DeleteResult(path=path, success=True)
        return DeleteResult(path=path, success=False, error=f"{type(e).__name__}: {e}")
    except OSError as e:
        return DeleteResult(path=path, success=False, error=f"{type(e).__name__}: {e}")
    return DeleteResult(path=path, success=True)


def log_failed_deletions(results: list[DeleteResult], context: str) -> None:
    for result in results:
        if not result.success:
            logger.warning("%s: could not delete %s (%s)", context, result.path, result.error)
