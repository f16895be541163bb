"""
Plugin scaffolding: the create-plugin questionnaire, the configuration
collector and the project generator.
"""

from .questions import Question, QuestionKind, SUPPORTED_ROCK_VERSIONS, default_questions
from .collector import (
    PromptDriver,
    PromptToolkitDriver,
    ScriptedDriver,
    collect_configuration,
)
from .generator import PluginGenerator

__all__ = [
    'Question',
    'QuestionKind',
    'SUPPORTED_ROCK_VERSIONS',
    'default_questions',
    'PromptDriver',
    'PromptToolkitDriver',
    'ScriptedDriver',
    'collect_configuration',
    'PluginGenerator',
]
