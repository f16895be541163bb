"""
Configuration Models

Pydantic model for the tool settings and the immutable mapping that carries
scaffold answers from the configuration collector to the template renderer.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ToolConfig(BaseModel):
    """Settings for the version synchronizer and the project generator."""

    model_config = ConfigDict(extra='forbid', validate_assignment=True)

    version_source: Path = Field(
        default=Path("Directory.Build.props"),
        description="Properties file holding the canonical <Version> element"
    )
    manifests: List[Path] = Field(
        default_factory=lambda: [Path("package.json")],
        description="Package manifests whose version follows the canonical version"
    )
    manifest_indent: int = Field(
        default=4,
        ge=1,
        le=8,
        description="Indentation width used when rewriting manifests"
    )
    templates_dir: Optional[Path] = Field(
        default=None,
        description="Directory with project templates (bundled templates when unset)"
    )
    verbose: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    @field_validator('manifests', mode='before')
    @classmethod
    def split_manifest_list(cls, v):
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(',') if item.strip()]
        return v

    @field_validator('manifests')
    @classmethod
    def require_manifest(cls, v: List[Path]) -> List[Path]:
        if not v:
            raise ValueError("at least one manifest must be tracked")
        return v

    def resolve_paths(self, base_dir: Path) -> 'ToolConfig':
        """Return a copy with every relative path anchored at ``base_dir``."""
        def anchor(path: Path) -> Path:
            return path if path.is_absolute() else base_dir / path

        return self.model_copy(update={
            'version_source': anchor(self.version_source),
            'manifests': [anchor(m) for m in self.manifests],
            'templates_dir': anchor(self.templates_dir) if self.templates_dir else None,
        })


class ScaffoldConfiguration(Mapping[str, Any]):
    """
    Immutable mapping from parameter name to value for one scaffold run.

    Keys use the names the templates reference, e.g. ``RockVersion`` or
    ``RestApiSupport``.
    """

    __slots__ = ('_values',)

    def __init__(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        data: Dict[str, Any] = dict(values or {})
        data.update(kwargs)
        self._values = MappingProxyType(data)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(tuple(sorted((k, repr(v)) for k, v in self._values.items())))

    def __repr__(self) -> str:
        return f"ScaffoldConfiguration({dict(self._values)!r})"

    def with_values(self, **updates: Any) -> 'ScaffoldConfiguration':
        """Return a new configuration with ``updates`` applied."""
        return ScaffoldConfiguration(self._values, **updates)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)
