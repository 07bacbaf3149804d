"""Atomic file writes shared by the note and task stores."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from typing import TYPE_CHECKING

from marknote.errors import IoFailure

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, text: str) -> None:
    """Write *text* to *path* so readers see either the old or the new file.

    The data goes to a hidden temp file in the same directory, which is
    renamed over *path* only once it has been fully written and flushed.
    On failure the temp file is removed and the original is untouched.
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        logger.warning("Write failed for %s: %s", path, e)
        raise IoFailure(path, e) from e
    logger.debug("Wrote %s (%d chars)", path, len(text))
