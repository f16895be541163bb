"""
Core Exception Hierarchy for the Rock Plugin Tool

Provides error classification with error codes, recovery suggestions and
context information. Every error in this module is fatal to the invocation:
the CLI boundary renders it and exits with a non-zero status.
"""

import uuid
from enum import Enum
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


class ErrorCode(Enum):
    """Standard error codes for different error categories."""

    # Version errors (1000-1999)
    VERSION_NOT_FOUND = 1001
    VERSION_AMBIGUOUS = 1002
    VERSION_MISMATCH = 1003
    MANIFEST_INVALID = 1004

    # Template errors (2000-2999)
    TEMPLATE_UNRESOLVED_VARIABLE = 2001
    TEMPLATE_SYNTAX = 2002
    TEMPLATE_NESTED_BLOCK = 2003
    TEMPLATE_INVALID_CONDITION = 2004
    TEMPLATE_NOT_FOUND = 2005

    # Prompt errors (3000-3999)
    PROMPT_ABORTED = 3001
    PROMPT_INVALID_CHOICE = 3002

    # Configuration errors (4000-4999)
    CONFIG_INVALID_FORMAT = 4001
    CONFIG_INVALID_VALUE = 4002
    CONFIG_FILE_NOT_FOUND = 4003

    # File system errors (5000-5999)
    FS_DIRECTORY_EXISTS = 5002
    FS_WRITE_FAILED = 5003

    # Generic errors (9000-9999)
    UNKNOWN_ERROR = 9000


@dataclass
class ErrorContext:
    """Contextual information about an error occurrence."""

    operation: str = ""
    file_path: Optional[str] = None
    key: Optional[str] = None
    correlation_id: Optional[str] = None
    user_context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            'operation': self.operation,
            'file_path': self.file_path,
            'key': self.key,
            'correlation_id': self.correlation_id,
            'user_context': self.user_context
        }


@dataclass
class RecoverySuggestion:
    """Structured recovery suggestion for error resolution."""

    action: str  # Brief action description
    description: str  # Detailed explanation
    command: Optional[str] = None  # CLI command to resolve
    priority: int = 1  # Priority order (1=highest)

    def to_dict(self) -> Dict[str, Any]:
        """Convert suggestion to dictionary."""
        return {
            'action': self.action,
            'description': self.description,
            'command': self.command,
            'priority': self.priority
        }


class RockPluginError(Exception):
    """
    Base exception for all Rock Plugin Tool errors.

    Carries an error code, recovery suggestions and context so the CLI can
    print an actionable message before terminating.
    """

    default_code = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[RecoverySuggestion]] = None
    ):
        """
        Initialize the error.

        Args:
            message: Human-readable error description
            error_code: Standardized error code, defaults to the class code
            context: Contextual information about the error
            cause: Original exception that caused this error
            suggestions: List of recovery suggestions
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.suggestions: List[RecoverySuggestion] = []
        for suggestion in suggestions or []:
            self.add_suggestion(suggestion)

        if not self.context.correlation_id:
            self.context.correlation_id = str(uuid.uuid4())[:8]

    def add_suggestion(self, suggestion: RecoverySuggestion) -> None:
        """Add a recovery suggestion to the error."""
        self.suggestions.append(suggestion)
        self.suggestions.sort(key=lambda s: s.priority)

    def get_user_message(self) -> str:
        """Get user-friendly error message with suggestions."""
        lines = [f"Error: {self.message}"]

        if self.error_code != ErrorCode.UNKNOWN_ERROR:
            lines.append(f"Error Code: {self.error_code.value}")

        if self.suggestions:
            lines.append("\nSuggested solutions:")
            for i, suggestion in enumerate(self.suggestions[:3], 1):
                lines.append(f"  {i}. {suggestion.action}")
                lines.append(f"     {suggestion.description}")
                if suggestion.command:
                    lines.append(f"     Command: {suggestion.command}")

        return "\n".join(lines)

    def get_debug_info(self) -> Dict[str, Any]:
        """Get comprehensive debug information."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code.value,
            'context': self.context.to_dict(),
            'cause': {
                'type': type(self.cause).__name__ if self.cause else None,
                'message': str(self.cause) if self.cause else None
            },
            'suggestions': [s.to_dict() for s in self.suggestions]
        }


class VersionNotFoundError(RockPluginError):
    """The canonical properties document has no usable version declaration."""

    default_code = ErrorCode.VERSION_NOT_FOUND

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        context = kwargs.pop('context', None) or ErrorContext(operation="read_version")
        if source:
            context.file_path = source
        super().__init__(message, context=context, **kwargs)

        self.add_suggestion(RecoverySuggestion(
            action="Check Directory.Build.props",
            description="The file must contain exactly one <Version>MAJOR.MINOR.PATCH</Version> element.",
            priority=1
        ))


class VersionMismatchError(RockPluginError):
    """A tracked manifest does not carry the canonical version."""

    default_code = ErrorCode.VERSION_MISMATCH

    def __init__(
        self,
        message: str,
        expected: str,
        actual: Optional[str],
        manifest: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or ErrorContext(operation="check_version")
        context.file_path = manifest
        context.user_context['expected'] = expected
        context.user_context['actual'] = actual
        super().__init__(message, context=context, **kwargs)

        self.expected = expected
        self.actual = actual
        self.manifest = manifest
        self.add_suggestion(RecoverySuggestion(
            action="Run the sync step first",
            description="Copy the canonical version into the manifest and commit the result.",
            command="rockplugin version sync",
            priority=1
        ))


class ManifestError(RockPluginError):
    """A package manifest could not be read or is not a JSON object."""

    default_code = ErrorCode.MANIFEST_INVALID


class TemplateError(RockPluginError):
    """Base class for template rendering failures."""

    default_code = ErrorCode.TEMPLATE_SYNTAX

    def __init__(self, message: str, template: Optional[str] = None,
                 line: Optional[int] = None, **kwargs):
        context = kwargs.pop('context', None) or ErrorContext(operation="render_template")
        if template:
            context.file_path = template
        if line is not None:
            context.user_context['line'] = line
        super().__init__(message, context=context, **kwargs)
        self.template = template
        self.line = line


class TemplateSyntaxError(TemplateError):
    """Malformed, unbalanced or nested template markers."""


class UnresolvedVariableError(TemplateError):
    """A template references a key that the configuration does not define."""

    default_code = ErrorCode.TEMPLATE_UNRESOLVED_VARIABLE

    def __init__(self, key: str, template: Optional[str] = None,
                 line: Optional[int] = None, **kwargs):
        where = f" in {template}" if template else ""
        at = f" (line {line})" if line is not None else ""
        super().__init__(
            f"Template variable '{key}' is not set{where}{at}",
            template=template,
            line=line,
            **kwargs
        )
        self.key = key
        self.context.key = key


class PromptAbortedError(RockPluginError):
    """The operator cancelled the prompt sequence."""

    default_code = ErrorCode.PROMPT_ABORTED

    def __init__(self, message: str = "Prompt aborted by operator",
                 question: Optional[str] = None, **kwargs):
        context = kwargs.pop('context', None) or ErrorContext(operation="collect_configuration")
        context.key = question
        super().__init__(message, context=context, **kwargs)
        self.question = question


class ConfigurationError(RockPluginError):
    """Exception for configuration-related errors."""

    default_code = ErrorCode.CONFIG_INVALID_FORMAT

    def __init__(self, message: str, config_key: Optional[str] = None,
                 config_value: Optional[Any] = None, **kwargs):
        context = kwargs.pop('context', None) or ErrorContext(operation="load_config")
        if config_key:
            context.key = config_key
            context.user_context['config_value'] = config_value
        super().__init__(message, context=context, **kwargs)


class ScaffoldError(RockPluginError):
    """A project could not be generated."""

    default_code = ErrorCode.FS_DIRECTORY_EXISTS


def config_error(message: str, key: Optional[str] = None, **kwargs) -> ConfigurationError:
    """Create a configuration error with key context."""
    return ConfigurationError(message, config_key=key, **kwargs)
