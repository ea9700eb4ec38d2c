"""Whole-file read/write helpers shared by the codec and the digest service."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from sealbox.core.exceptions import IoFailureError

logger = logging.getLogger(__name__)


def read_all(path) -> bytes:
    # Reads the full content of a file into memory.
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise IoFailureError(f"Error reading file '{path}': {e}") from e


def read_optional(path) -> Optional[bytes]:
    """Read a file if it can be opened, otherwise return None.

    Used for sources whose absence is tolerated (associated data files).
    """
    if path is None:
        return None
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        logger.warning("Could not open '%s' (%s); continuing without it", path, e)
        return None


def file_size(path) -> int:
    try:
        return Path(path).stat().st_size
    except OSError as e:
        raise IoFailureError(f"Error reading size of '{path}': {e}") from e


def write_all(path, content: bytes) -> None:
    """Write content to path atomically.

    The bytes go to a temporary file in the destination directory which is then
    renamed over ``path``, so a failed write never leaves a partial file behind.
    """
    destination = Path(path)
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(dir=destination.parent, prefix=".sealbox-", delete=False) as tmpf:
            tmp_path = Path(tmpf.name)
            tmpf.write(content)
        os.replace(tmp_path, destination)
    except OSError as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise IoFailureError(f"Error writing file '{path}': {e}") from e
    logger.debug("Wrote %d bytes to '%s'", len(content), destination)
