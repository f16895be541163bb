"""
Version synchronization between Directory.Build.props and package manifests.
"""

from .source import read_canonical_version, load_canonical_version
from .sync import VersionSynchronizer, read_manifest_version

__all__ = [
    'read_canonical_version',
    'load_canonical_version',
    'VersionSynchronizer',
    'read_manifest_version',
]
