"""
Version Synchronizer

Keeps the ``version`` field of package manifests equal to the canonical
version. ``sync`` rewrites manifests; ``check`` only compares and is meant to
run as a pre-publish gate.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from rockplugin.core.exceptions import ErrorCode, ManifestError, VersionMismatchError
from rockplugin.core.file_ops import atomic_write_text

logger = logging.getLogger(__name__)

REMEDIATION = "run 'rockplugin version sync' first"
DEFAULT_SOURCE_NAME = "Directory.Build.props"


def _read_manifest_text(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest {path} does not exist", cause=e)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Could not read manifest {path}: {e}", cause=e)


def _parse_manifest(text: str, path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest {path} is not valid JSON: {e}", cause=e)

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")
    return data


def load_manifest(manifest_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a package manifest, keeping its key order.

    Raises:
        ManifestError: If the file is missing or unreadable, is not JSON or
            is not an object
    """
    path = Path(manifest_path)
    return _parse_manifest(_read_manifest_text(path), path)


def read_manifest_version(manifest_path: Union[str, Path]) -> Optional[str]:
    """Return the manifest's ``version`` value, or ``None`` if it has none."""
    version = load_manifest(manifest_path).get('version')
    return None if version is None else str(version)


def dump_manifest(data: Dict[str, Any], indent: int = 4) -> str:
    """Serialize a manifest in the normalized style."""
    return json.dumps(data, indent=indent, ensure_ascii=False) + "\n"


class VersionSynchronizer:
    """
    Writes or verifies the canonical version in package manifests.

    Args:
        version: The canonical version
        indent: Indentation width for rewritten manifests
        source: Properties file the version was read from, named in
            mismatch messages
    """

    def __init__(self, version: str, indent: int = 4,
                 source: Optional[Union[str, Path]] = None):
        self.version = version
        self.indent = indent
        self.source_name = Path(source).name if source else DEFAULT_SOURCE_NAME

    def sync(self, manifest_path: Union[str, Path]) -> bool:
        """
        Set the manifest version to the canonical version.

        Unrelated fields and key order are kept; formatting is normalized.

        Returns:
            True if the file content changed
        """
        path = Path(manifest_path)
        original = _read_manifest_text(path)

        data = _parse_manifest(original, path)
        data['version'] = self.version
        content = dump_manifest(data, self.indent)

        if content == original:
            logger.debug(f"{path} already up to date")
            return False

        try:
            atomic_write_text(path, content)
        except OSError as e:
            raise ManifestError(f"Failed to write manifest {path}: {e}",
                                error_code=ErrorCode.FS_WRITE_FAILED, cause=e)
        logger.info(f"Set version of {path} to {self.version}")
        return True

    def sync_all(self, manifest_paths: Iterable[Union[str, Path]]) -> List[Path]:
        """Synchronize every manifest, returning the ones that changed."""
        return [Path(p) for p in manifest_paths if self.sync(p)]

    def check(self, manifest_path: Union[str, Path]) -> None:
        """
        Verify the manifest carries the canonical version.

        Never modifies the file.

        Raises:
            VersionMismatchError: If the versions differ or the manifest has
                no version
        """
        path = Path(manifest_path)
        actual = read_manifest_version(path)
        if actual != self.version:
            raise VersionMismatchError(
                f"Version number in {path} ({actual or 'missing'}) does not match "
                f"{self.source_name} ({self.version}), {REMEDIATION}.",
                expected=self.version,
                actual=actual,
                manifest=str(path)
            )
        logger.debug(f"{path} matches version {self.version}")

    def find_mismatches(self, manifest_paths: Iterable[Union[str, Path]]) -> List[VersionMismatchError]:
        """Check every manifest and collect the failures instead of stopping at the first."""
        mismatches = []
        for manifest_path in manifest_paths:
            try:
                self.check(manifest_path)
            except VersionMismatchError as e:
                mismatches.append(e)
        return mismatches
