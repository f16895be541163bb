"""
Plugin Project Generator

Generates the plugin projects from the bundled templates: a C# project and,
when requested, an Obsidian project next to it.

Every file is rendered before anything is written. If writing fails the
directories created by this run are removed again.
"""

import os
import shutil
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union, Any

from rockplugin.core.config.models import ScaffoldConfiguration
from rockplugin.core.exceptions import ErrorCode, ScaffoldError
from rockplugin.core.file_ops import atomic_write_text
from rockplugin.core.templates import TemplateRenderer

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / 'templates'


@dataclass(frozen=True)
class ProjectSpec:
    """Describes one generated project."""

    directory: str  # Directory name, rendered as a template
    files: Tuple[Tuple[str, str], ...]  # (template path, output name template)
    enabled_by: Optional[str] = None  # Boolean configuration key, None for always


PROJECTS: Tuple[ProjectSpec, ...] = (
    ProjectSpec(
        directory="{{ OrganizationCode }}.{{ PluginCode }}",
        files=(
            ("csharp/project.csproj", "{{ OrganizationCode }}.{{ PluginCode }}.csproj"),
            ("csharp/Class1.cs", "Class1.cs"),
            ("csharp/gitignore", ".gitignore"),
        ),
    ),
    ProjectSpec(
        directory="{{ OrganizationCode }}.{{ PluginCode }}.Obsidian",
        files=(
            ("obsidian/project.esproj", "{{ OrganizationCode }}.{{ PluginCode }}.Obsidian.esproj"),
            ("obsidian/package.json", "package.json"),
            ("obsidian/rollup.config.cjs", "rollup.config.cjs"),
            ("obsidian/gitignore", ".gitignore"),
        ),
        enabled_by="Obsidian",
    ),
)


def relative_rockweb_path(rock_web_path: str, output_dir: Path, project_dir: Path) -> str:
    """
    Re-express a RockWeb path given relative to ``output_dir`` so that it is
    relative to ``project_dir`` instead.
    """
    if not rock_web_path:
        return rock_web_path
    normalized = rock_web_path.replace('\\', '/')
    target = Path(normalized) if Path(normalized).is_absolute() else output_dir / normalized
    try:
        return os.path.relpath(os.path.abspath(target), os.path.abspath(project_dir))
    except ValueError:
        # No relative path between different Windows drives
        return os.path.abspath(target)


def missing_directories(directory: Path) -> List[Path]:
    """Directories that creating ``directory`` would add, outermost first."""
    missing = []
    while not directory.exists() and directory != directory.parent:
        missing.append(directory)
        directory = directory.parent
    return list(reversed(missing))


class PluginGenerator:
    """
    Generates plugin projects from templates.

    Args:
        templates_dir: Directory holding the project templates
        renderer: Template renderer, a default one is created when omitted
    """

    def __init__(self, templates_dir: Optional[Union[str, Path]] = None,
                 renderer: Optional[TemplateRenderer] = None,
                 projects: Tuple[ProjectSpec, ...] = PROJECTS):
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self.renderer = renderer or TemplateRenderer()
        self.projects = projects

        if not self.templates_dir.is_dir():
            raise ScaffoldError(f"Templates directory not found: {self.templates_dir}",
                                error_code=ErrorCode.TEMPLATE_NOT_FOUND)

    def plan(self, configuration: ScaffoldConfiguration,
             output_dir: Union[str, Path]) -> Dict[Path, str]:
        """
        Render every file of the enabled projects without touching the disk.

        Returns:
            Mapping of output path to rendered content

        Raises:
            ScaffoldError: If a project directory already exists or a template
                is missing
            UnresolvedVariableError: If a template uses an unset key
        """
        output_dir = Path(output_dir)
        rendered: Dict[Path, str] = {}

        for project in self._enabled_projects(configuration):
            project_dir = output_dir / self.renderer.render(project.directory, configuration)
            if project_dir.exists():
                raise ScaffoldError(f"Directory {project_dir.name} already exists, aborting.",
                                    error_code=ErrorCode.FS_DIRECTORY_EXISTS)

            project_config = configuration.with_values(
                RockWebPath=relative_rockweb_path(
                    configuration.get("RockWebPath", ""), output_dir, project_dir
                )
            )

            for template_name, output_name in project.files:
                template_path = self.templates_dir / template_name
                if not template_path.is_file():
                    raise ScaffoldError(f"Template {template_name} not found",
                                        error_code=ErrorCode.TEMPLATE_NOT_FOUND)
                filename = self.renderer.render(output_name, project_config)
                rendered[project_dir / filename] = self.renderer.render_file(template_path, project_config)

        return rendered

    def generate(self, configuration: ScaffoldConfiguration,
                 output_dir: Union[str, Path]) -> List[Path]:
        """
        Create the plugin projects in ``output_dir``.

        Returns:
            Paths of the written files

        Raises:
            ScaffoldError: If the projects cannot be generated
        """
        files = self.plan(configuration, output_dir)

        created_dirs: List[Path] = []
        written: List[Path] = []
        try:
            for path, content in files.items():
                new_dirs = missing_directories(path.parent)
                if new_dirs:
                    created_dirs.extend(new_dirs)
                    path.parent.mkdir(parents=True)
                    logger.info(f"Created directory {path.parent}")
                written.append(atomic_write_text(path, content))
                logger.debug(f"Created {path}")
        except OSError as e:
            for directory in reversed(created_dirs):
                shutil.rmtree(directory, ignore_errors=True)
            raise ScaffoldError(f"Failed to create plugin files: {e}",
                                error_code=ErrorCode.FS_WRITE_FAILED, cause=e)

        return written

    def _enabled_projects(self, configuration: Mapping[str, Any]) -> List[ProjectSpec]:
        return [p for p in self.projects
                if p.enabled_by is None or configuration.get(p.enabled_by) is True]
