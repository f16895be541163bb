"""
Version Source Reader

Reads the canonical semantic version from the shared Directory.Build.props
file. There is no default version: a missing or ambiguous declaration is
always an error.
"""

import re
import logging
from pathlib import Path
from typing import Optional, Union

from rockplugin.core.exceptions import ErrorCode, VersionNotFoundError

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r'<Version>\s*(\d+[^<\s]*)\s*</Version>')


def read_canonical_version(document: str, source: Optional[str] = None) -> str:
    """
    Extract the version from the text of a properties document.

    Args:
        document: Text of the properties file
        source: Name of the document, used in error messages

    Returns:
        The version string, e.g. ``1.16.2`` or ``1.16.3-alpha.1``

    Raises:
        VersionNotFoundError: If the document has no version declaration or
            declares different versions
    """
    found = VERSION_PATTERN.findall(document)
    name = source or "properties document"

    if not found:
        raise VersionNotFoundError(f"Could not find version number in {name}", source=source)

    if len(set(found)) > 1:
        raise VersionNotFoundError(
            f"Found conflicting version numbers in {name}: {', '.join(found)}",
            source=source,
            error_code=ErrorCode.VERSION_AMBIGUOUS
        )

    return found[0]


def load_canonical_version(props_path: Union[str, Path]) -> str:
    """
    Read the canonical version from a properties file on disk.

    Raises:
        VersionNotFoundError: If the file is missing, unreadable or has no
            version
    """
    path = Path(props_path)
    try:
        document = path.read_text(encoding='utf-8')
    except FileNotFoundError as e:
        raise VersionNotFoundError(f"Version source {path} does not exist", source=str(path), cause=e)
    except (OSError, UnicodeDecodeError) as e:
        raise VersionNotFoundError(f"Could not read version source {path}: {e}", source=str(path), cause=e)

    version = read_canonical_version(document, source=str(path))
    logger.debug(f"Canonical version {version} read from {path}")
    return version
