"""
Scaffold Questions

The ordered questionnaire for ``rockplugin create``. Select questions carry
a closed list of choices owned by this module.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

# Rock versions a new plugin can target
SUPPORTED_ROCK_VERSIONS: Tuple[str, ...] = ("1.16.0",)

# Candidate RockWeb locations, relative to the output directory
ROCKWEB_CANDIDATES: Tuple[Path, ...] = (Path("RockWeb"), Path("Rock") / "RockWeb")

_ORG_CODE_RE = re.compile(r'^[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)*$')

# Returns an error message, or None when the value is acceptable
TextValidator = Callable[[str], Optional[str]]


class QuestionKind(Enum):
    """Kinds of question the collector can ask."""
    SELECT = "select"
    CONFIRM = "confirm"
    TEXT = "text"


@dataclass(frozen=True)
class Choice:
    """One entry of a select question."""
    title: str
    value: Any


@dataclass(frozen=True)
class Question:
    """
    A single question of the scaffold questionnaire.

    ``when`` decides from the answers so far whether the question is asked;
    a skipped question records ``skip_value``.
    """
    kind: QuestionKind
    name: str
    message: str
    choices: Tuple[Choice, ...] = ()
    default: Any = None
    validator: Optional[TextValidator] = None
    when: Optional[Callable[[Dict[str, Any]], bool]] = None
    skip_value: Any = None

    def choice_values(self) -> List[Any]:
        return [choice.value for choice in self.choices]

    def validate(self, value: Any) -> Optional[str]:
        """Return an error message if ``value`` is not a valid answer."""
        if self.kind is QuestionKind.SELECT:
            if value not in self.choice_values():
                allowed = ', '.join(str(v) for v in self.choice_values())
                return f"'{value}' is not one of: {allowed}"
            return None
        if self.kind is QuestionKind.CONFIRM:
            if not isinstance(value, bool):
                return f"expected true or false, got {value!r}"
            return None
        if not isinstance(value, str):
            return f"expected text, got {value!r}"
        return self.validator(value) if self.validator else None

    def is_asked(self, answers: Dict[str, Any]) -> bool:
        return self.when is None or self.when(answers)


def select(name: str, message: str, values: Sequence[Union[str, Choice]], **kwargs) -> Question:
    """Build a single-select question from plain values or choices."""
    choices = tuple(v if isinstance(v, Choice) else Choice(str(v), v) for v in values)
    return Question(QuestionKind.SELECT, name, message, choices=choices, **kwargs)


def confirm(name: str, message: str, default: bool = False, **kwargs) -> Question:
    return Question(QuestionKind.CONFIRM, name, message, default=default, **kwargs)


def text(name: str, message: str, **kwargs) -> Question:
    return Question(QuestionKind.TEXT, name, message, **kwargs)


def required(label: str) -> TextValidator:
    def check(value: str) -> Optional[str]:
        return None if value.strip() else f"{label} is required"
    return check


def organization_code(value: str) -> Optional[str]:
    if not value.strip():
        return "Organization Code is required"
    if not _ORG_CODE_RE.match(value.strip()):
        return "Use dotted identifiers, e.g. com.rocksolidchurchdemo"
    return None


def rockweb_path(base_dir: Path) -> TextValidator:
    """Validator for a RockWeb path relative to ``base_dir``; empty means none."""
    def check(value: str) -> Optional[str]:
        if not value.strip():
            return None
        candidate = base_dir / value.strip()
        if not candidate.is_dir():
            return "That path does not appear to exist"
        if not (candidate / "web.config").is_file():
            return "That path does not appear to be a RockWeb path"
        return None
    return check


def detect_rockweb(base_dir: Path) -> str:
    """Return the first RockWeb candidate under ``base_dir``, or ``""``."""
    for candidate in ROCKWEB_CANDIDATES:
        if (base_dir / candidate / "web.config").is_file():
            return str(candidate)
    return ""


def default_questions(base_dir: Path) -> List[Question]:
    """
    The ``rockplugin create`` questionnaire.

    Args:
        base_dir: Directory the project is generated in, used to validate and
            suggest the RockWeb path
    """
    return [
        text("Organization", "Organization",
             default="Rock Solid Church Demo", validator=required("Organization")),
        text("OrganizationCode", "Organization Code",
             default="com.rocksolidchurchdemo", validator=organization_code),
        text("PluginName", "Plugin Name", validator=required("Plugin Name")),
        select("RockVersion", "Target Rock version", SUPPORTED_ROCK_VERSIONS),
        text("RockWebPath", "Path to RockWeb (leave empty to skip)",
             default=detect_rockweb(base_dir), validator=rockweb_path(base_dir)),
        confirm("Obsidian", "Create Obsidian Project", default=True),
        confirm("RestApiSupport", "Include REST API support", default=False),
        confirm("Copy", "Copy artifacts to RockWeb", default=True,
                when=lambda answers: bool(answers.get("RockWebPath")),
                skip_value=False),
    ]
