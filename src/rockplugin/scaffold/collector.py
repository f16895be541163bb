"""
Interactive Configuration Collector

Asks the scaffold questions one at a time and accumulates the answers into a
ScaffoldConfiguration. Terminal I/O lives behind the PromptDriver interface
so a scripted driver can stand in for the operator.

A driver returns ``None`` (or raises KeyboardInterrupt/EOFError) when the
operator cancels. Cancellation always aborts the whole sequence; a partial
configuration is never returned.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Mapping, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.shortcuts import radiolist_dialog
from prompt_toolkit.validation import ValidationError as PromptValidationError
from prompt_toolkit.validation import Validator

from rockplugin import __version__
from rockplugin.core.config.models import ScaffoldConfiguration
from rockplugin.core.exceptions import ConfigurationError, ErrorCode, PromptAbortedError
from rockplugin.scaffold.questions import Question, QuestionKind

logger = logging.getLogger(__name__)


class PromptDriver(ABC):
    """Capability interface for asking one question."""

    def ask(self, question: Question) -> Optional[Any]:
        """Ask ``question`` and return the answer, or ``None`` if cancelled."""
        if question.kind is QuestionKind.SELECT:
            return self.select(question)
        if question.kind is QuestionKind.CONFIRM:
            return self.confirm(question)
        return self.text(question)

    @abstractmethod
    def select(self, question: Question) -> Optional[Any]:
        """Pick one of ``question.choices``."""

    @abstractmethod
    def confirm(self, question: Question) -> Optional[bool]:
        """Answer yes or no."""

    @abstractmethod
    def text(self, question: Question) -> Optional[str]:
        """Enter free text accepted by ``question.validator``."""


class _QuestionValidator(Validator):
    """Adapts a question's validator to prompt_toolkit."""

    def __init__(self, question: Question):
        self.question = question

    def validate(self, document) -> None:
        error = self.question.validate(document.text)
        if error:
            raise PromptValidationError(message=error, cursor_position=len(document.text))


def confirm_key_bindings(default: bool) -> KeyBindings:
    """
    Key bindings for a yes/no prompt: y or n answers at once, Enter takes
    ``default`` and every other key is ignored.
    """
    bindings = KeyBindings()

    def answer(event, value: bool) -> None:
        event.app.current_buffer.text = "y" if value else "n"
        event.app.exit(result=value)

    @bindings.add("y")
    @bindings.add("Y")
    def _yes(event) -> None:
        answer(event, True)

    @bindings.add("n")
    @bindings.add("N")
    def _no(event) -> None:
        answer(event, False)

    @bindings.add("enter")
    def _default(event) -> None:
        answer(event, default)

    @bindings.add(Keys.Any)
    def _ignore(event) -> None:
        pass

    return bindings


class PromptToolkitDriver(PromptDriver):
    """Asks questions on the terminal with prompt_toolkit."""

    def __init__(self, title: str = "Create Rock Plugin"):
        self.title = title
        self._session: Optional[PromptSession] = None

    @property
    def session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession()
        return self._session

    def select(self, question: Question) -> Optional[Any]:
        return radiolist_dialog(
            title=self.title,
            text=question.message,
            values=[(choice.value, choice.title) for choice in question.choices],
        ).run()

    def confirm(self, question: Question) -> Optional[bool]:
        default = bool(question.default)
        suffix = " (Y/n) " if default else " (y/N) "
        session = PromptSession(f"{question.message}{suffix}",
                                key_bindings=confirm_key_bindings(default))
        return session.prompt()

    def text(self, question: Question) -> Optional[str]:
        answer = self.session.prompt(
            f"{question.message}: ",
            default=question.default or "",
            validator=_QuestionValidator(question),
            validate_while_typing=False,
        )
        return answer.strip()


class ScriptedDriver(PromptDriver):
    """
    Answers questions from a mapping, for tests and non-interactive runs.

    A question missing from the mapping is treated as a cancelled prompt.
    """

    def __init__(self, answers: Optional[Mapping[str, Any]] = None):
        self.answers: Dict[str, Any] = dict(answers or {})
        self.asked = []

    def ask(self, question: Question) -> Optional[Any]:
        self.asked.append(question.name)
        return super().ask(question)

    def select(self, question: Question) -> Optional[Any]:
        return self.answers.get(question.name)

    def confirm(self, question: Question) -> Optional[bool]:
        return self.answers.get(question.name)

    def text(self, question: Question) -> Optional[str]:
        return self.answers.get(question.name)


def plugin_code(plugin_name: str) -> str:
    """Identifier form of a plugin name, e.g. ``Check-in Labels`` -> ``CheckinLabels``."""
    return re.sub(r'[^A-Za-z0-9]', '', plugin_name)


def derived_values(answers: Mapping[str, Any]) -> Dict[str, Any]:
    """Values computed from the answers rather than asked for."""
    derived: Dict[str, Any] = {"ToolVersion": __version__}
    if "PluginName" in answers:
        derived["PluginCode"] = plugin_code(answers["PluginName"])
    return derived


def collect_configuration(
    questions: Iterable[Question],
    driver: PromptDriver,
    presets: Optional[Mapping[str, Any]] = None,
) -> ScaffoldConfiguration:
    """
    Ask every question in order and build the scaffold configuration.

    Args:
        questions: Ordered questionnaire
        driver: Prompt implementation used for unanswered questions
        presets: Answers given up front, e.g. on the command line; these skip
            their question but are still validated

    Returns:
        Complete configuration including derived values

    Raises:
        PromptAbortedError: If the operator cancels any prompt
        ConfigurationError: If a preset or a driver answer is not acceptable
    """
    presets = presets or {}
    answers: Dict[str, Any] = {}

    for question in questions:
        if not question.is_asked(answers):
            answers[question.name] = question.skip_value
            continue

        if question.name in presets and presets[question.name] is not None:
            value = presets[question.name]
            source = "preset"
        else:
            try:
                value = driver.ask(question)
            except (KeyboardInterrupt, EOFError) as e:
                raise PromptAbortedError(f"Aborted while asking for {question.name}",
                                         question=question.name, cause=e)
            if value is None:
                raise PromptAbortedError(f"Aborted while asking for {question.name}",
                                         question=question.name)
            source = "prompt"

        error = question.validate(value)
        if error:
            raise ConfigurationError(
                f"Invalid answer for {question.name}: {error}",
                config_key=question.name,
                config_value=value,
                error_code=ErrorCode.PROMPT_INVALID_CHOICE
            )
        if isinstance(value, str):
            value = value.strip()

        logger.debug(f"{question.name} = {value!r} ({source})")
        answers[question.name] = value

    answers.update(derived_values(answers))
    return ScaffoldConfiguration(answers)
