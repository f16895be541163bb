"""
File Operations

All-or-nothing text writes used by the version synchronizer and the
project generator.
"""

import os
import logging
import tempfile
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def atomic_write_text(file_path: Union[str, Path], content: str,
                      encoding: str = 'utf-8') -> Path:
    """
    Write text to a file so that readers see either the old or the new content.

    The content goes to a temporary file in the same directory which then
    replaces the target.

    Args:
        file_path: Path to write to
        content: Text content
        encoding: Text encoding

    Returns:
        Path object of written file
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        # newline='' keeps "\n" on every platform
        with os.fdopen(fd, 'w', encoding=encoding, newline='') as f:
            f.write(content)
        os.replace(temp_name, path)
    except BaseException:
        if os.path.exists(temp_name):
            os.unlink(temp_name)
        raise

    logger.debug(f"Wrote {len(content)} characters to {path}")
    return path

