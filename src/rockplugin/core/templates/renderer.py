"""
Template Renderer

Jinja2-based rendering of the project templates against a scaffold
configuration. Templates are restricted to a small fixed syntax:

* ``{{ Name }}`` substitutes the configuration value ``Name``.
* ``{{ Name | path }}`` substitutes a path with the platform directory
  separator, ``{{ Name | posix }}`` always uses ``/``.
* ``{% if Name == true %}`` ... ``{% endif %}`` emits the enclosed content only
  when the boolean value ``Name`` is true. ``{% if Name %}`` is equivalent.

Conditional blocks do not nest and have no ``else``. A block tag that sits
alone on its line takes the whole line with it, so a removed block leaves no
blank line behind.
"""

import os
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import jinja2
from jinja2 import Environment, StrictUndefined, meta, nodes

from rockplugin.core.exceptions import (
    ErrorCode,
    TemplateError,
    TemplateSyntaxError,
    UnresolvedVariableError,
)

logger = logging.getLogger(__name__)


def _native_path(value: str, separator: str) -> str:
    return value.replace('\\', '/').replace('/', separator)


def _posix_path(value: str, separator: str) -> str:
    return value.replace('\\', '/')


FILTERS: Dict[str, Callable[[str, str], str]] = {
    'path': _native_path,
    'posix': _posix_path,
}


def format_value(value: Any) -> str:
    """String form of a configuration value inside a rendered file."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _is_true_literal(node: nodes.Node) -> bool:
    return isinstance(node, nodes.Const) and node.value is True


def _condition_name(test: nodes.Node) -> Optional[str]:
    """Name tested by ``if Name`` or ``if Name == true``, else None."""
    if isinstance(test, nodes.Name):
        return test.name
    if (isinstance(test, nodes.Compare) and isinstance(test.expr, nodes.Name)
            and len(test.ops) == 1 and test.ops[0].op == 'eq'
            and _is_true_literal(test.ops[0].expr)):
        return test.expr.name
    return None


class TemplateRenderer:
    """
    Renders templates against a scaffold configuration.

    Rendering is pure: the same template text and configuration always yield
    the same output, and nothing is written to disk.
    """

    def __init__(self, path_separator: str = os.sep):
        """
        Args:
            path_separator: Separator used by the ``path`` filter
        """
        self.path_separator = path_separator
        self.env = Environment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            finalize=format_value,
        )
        self._register_filters()

    def _register_filters(self) -> None:
        for name, function in FILTERS.items():
            self.env.filters[name] = self._make_filter(function)

    def _make_filter(self, function: Callable[[str, str], str]) -> Callable[[Any], str]:
        def apply(value: Any) -> str:
            return function(format_value(value), self.path_separator)
        return apply

    def parse(self, source: str, template_name: Optional[str] = None) -> nodes.Template:
        """
        Parse template text and check it only uses the supported syntax.

        Raises:
            TemplateSyntaxError: For malformed markers, unknown filters,
                unsupported tags and nested conditional blocks
        """
        try:
            tree = self.env.parse(source, name=template_name)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateSyntaxError(e.message or str(e), template=template_name,
                                      line=e.lineno, cause=e)

        for node in tree.body:
            if isinstance(node, nodes.If):
                self._check_block(node, template_name)
            else:
                self._check_statement(node, template_name)
        return tree

    def render(self, source: str, configuration: Mapping[str, Any],
               template_name: Optional[str] = None) -> str:
        """
        Render template text.

        Args:
            source: Template text
            configuration: Values for the placeholders and conditions
            template_name: Name used in error messages

        Returns:
            The rendered text

        Raises:
            UnresolvedVariableError: If any referenced key is missing,
                including keys referenced only inside a disabled block
            TemplateSyntaxError: If the markers are malformed or nested
            TemplateError: If a condition refers to a non-boolean value
        """
        tree = self.parse(source, template_name)
        self._check_references(tree, configuration, template_name)
        self._check_conditions(tree, configuration, template_name)

        try:
            return self.env.from_string(tree).render(dict(configuration))
        except jinja2.UndefinedError as e:
            raise TemplateError(str(e), template=template_name,
                                error_code=ErrorCode.TEMPLATE_UNRESOLVED_VARIABLE, cause=e)

    def render_file(self, template_path: Union[str, Path],
                    configuration: Mapping[str, Any]) -> str:
        """Read a template file and render it."""
        path = Path(template_path)
        source = path.read_text(encoding='utf-8')
        logger.debug(f"Rendering template {path}")
        return self.render(source, configuration, template_name=path.name)

    def referenced_keys(self, source: str) -> List[str]:
        """Configuration keys a template refers to, in order of first use."""
        return [node.name for node in self._names(self.parse(source))]

    @staticmethod
    def _names(tree: nodes.Template) -> List[nodes.Name]:
        seen = set()
        found = []
        for node in tree.find_all(nodes.Name):
            if node.name not in seen:
                seen.add(node.name)
                found.append(node)
        return found

    def _check_block(self, node: nodes.If, template_name: Optional[str]) -> None:
        if _condition_name(node.test) is None:
            raise TemplateSyntaxError(
                "Conditions must have the form 'if Name' or 'if Name == true'",
                template=template_name, line=node.lineno
            )
        if node.elif_ or node.else_:
            raise TemplateSyntaxError(
                "Conditional blocks cannot have 'elif' or 'else' branches",
                template=template_name, line=node.lineno
            )
        for child in node.body:
            if isinstance(child, nodes.If):
                raise TemplateSyntaxError(
                    f"Nested conditional block '{_condition_name(child.test)}' inside "
                    f"'{_condition_name(node.test)}' (opened on line {node.lineno})",
                    template=template_name, line=child.lineno,
                    error_code=ErrorCode.TEMPLATE_NESTED_BLOCK
                )
            self._check_statement(child, template_name)

    def _check_statement(self, node: nodes.Node, template_name: Optional[str]) -> None:
        if not isinstance(node, nodes.Output):
            raise TemplateSyntaxError(
                f"Unsupported block tag '{type(node).__name__.lower()}'",
                template=template_name, line=node.lineno
            )
        for child in node.nodes:
            if isinstance(child, (nodes.TemplateData, nodes.Name)):
                continue
            if (isinstance(child, nodes.Filter) and isinstance(child.node, nodes.Name)
                    and not child.args and not child.kwargs
                    and child.dyn_args is None and child.dyn_kwargs is None):
                if child.name not in FILTERS:
                    raise TemplateSyntaxError(
                        f"Unknown filter '{child.name}' on '{child.node.name}'",
                        template=template_name, line=child.lineno
                    )
                continue
            raise TemplateSyntaxError(
                "Invalid placeholder, expected '{{ Name }}' or '{{ Name | filter }}'",
                template=template_name, line=child.lineno
            )

    def _check_references(self, tree: nodes.Template, configuration: Mapping[str, Any],
                          template_name: Optional[str]) -> None:
        missing = meta.find_undeclared_variables(tree) - set(configuration)
        if not missing:
            return
        first = next(node for node in self._names(tree) if node.name in missing)
        raise UnresolvedVariableError(first.name, template=template_name, line=first.lineno)

    @staticmethod
    def _check_conditions(tree: nodes.Template, configuration: Mapping[str, Any],
                          template_name: Optional[str]) -> None:
        for node in tree.find_all(nodes.If):
            name = _condition_name(node.test)
            value = configuration[name]
            if not isinstance(value, bool):
                raise TemplateError(
                    f"Condition '{name}' must be true or false, got {value!r}",
                    template=template_name, line=node.lineno,
                    error_code=ErrorCode.TEMPLATE_INVALID_CONDITION
                )
