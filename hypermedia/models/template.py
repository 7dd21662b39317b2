"""
URI templates (RFC 6570, levels 1-4).

A template is an ordered sequence of literal strings and variable groups.
Rendering the segments back to text always reproduces the parsed pattern,
and every "mutation" returns a new template.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from hypermedia.config.settings import settings
from hypermedia.exceptions import MalformedTemplate
from hypermedia.models.variable import (
    OPERATORS,
    RESERVED_OPERATORS,
    Operator,
    TemplateVariable,
    VariableType,
)

logger = logging.getLogger(__name__)

# max-length = %x31-39 0*3DIGIT
_PREFIX_LENGTH = re.compile(r"[1-9][0-9]{0,3}")


# -----------------------------------------------------------------------------
# Segments
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class VariableGroup:
    """One ``{...}`` expression: an operator shared by one or more variables."""
    operator: Operator
    variables: Tuple[TemplateVariable, ...]

    @property
    def explode_flags(self) -> Tuple[bool, ...]:
        return tuple(variable.exploded for variable in self.variables)

    def expand(self, values: Mapping[str, Any]) -> str:
        rendered = []
        for variable in self.variables:
            value = values.get(variable.name)
            if value is None and variable.is_required():
                logger.debug("Required variable %r has no value, rendering nothing", variable.name)
            part = variable.render(value)
            if part is not None:
                rendered.append(part)

        # All variables undefined: the whole expression disappears, prefix included
        if not rendered:
            return ""
        return self.operator.first + self.operator.separator.join(rendered)

    def __str__(self) -> str:
        return "{" + self.operator.key + ",".join(v.varspec for v in self.variables) + "}"


Segment = Union[str, VariableGroup]


def _parse_expression(pattern: str, expression: str, position: int) -> VariableGroup:
    if not expression:
        raise MalformedTemplate(pattern, "empty expression", position)

    key = expression[0]
    if key in RESERVED_OPERATORS:
        raise MalformedTemplate(pattern, f"operator {key!r} is reserved", position + 1)
    if key in OPERATORS:
        body = expression[1:]
    else:
        key, body = "", expression
    if not body:
        raise MalformedTemplate(pattern, "expression has no variables", position)

    variables = []
    for varspec in body.split(","):
        explode = False
        max_length = None
        name = varspec
        if varspec.endswith("*"):
            explode, name = True, varspec[:-1]
        elif ":" in varspec:
            name, _, length = varspec.partition(":")
            if not _PREFIX_LENGTH.fullmatch(length):
                raise MalformedTemplate(pattern, f"invalid prefix modifier in {varspec!r}", position)
            max_length = int(length)
        if not name:
            raise MalformedTemplate(pattern, f"empty variable name in {expression!r}", position)

        variable_type = VariableType.from_operator(key, explode)
        variables.append(TemplateVariable(
            name,
            variable_type,
            explode=explode and not variable_type.is_exploded,
            max_length=max_length,
        ))

    return VariableGroup(OPERATORS[key], tuple(variables))


# -----------------------------------------------------------------------------
# UriTemplate
# -----------------------------------------------------------------------------
class UriTemplate:
    """
    Parsed URI template.

    Instances are immutable and safe to share between threads; ``UriTemplate.of``
    hands out cached instances for identical patterns.

    Example:
        >>> template = UriTemplate.of("/{segment}/something")
        >>> template = template.with_variable(TemplateVariable.request_parameter("parameter"))
        >>> str(template)
        '/{segment}/something{?parameter}'
        >>> template.expand(segment="people", parameter=42)
        '/people/something?parameter=42'
    """

    __slots__ = ("_segments", "_variables", "_pattern")

    def __init__(self, segments: Iterable[Segment] = ()) -> None:
        self._segments: Tuple[Segment, ...] = tuple(segments)
        self._pattern = "".join(str(segment) for segment in self._segments)

        unique: dict[str, TemplateVariable] = {}
        for group in self._groups():
            for variable in group.variables:
                unique.setdefault(variable.name, variable)
        self._variables = tuple(unique.values())

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------
    @classmethod
    def parse(cls, pattern: str) -> UriTemplate:
        """Parse ``pattern`` into literal and expression segments. Values are never inspected."""
        segments: list[Segment] = []
        position = 0
        length = len(pattern)

        while position < length:
            start = pattern.find("{", position)
            literal_end = length if start == -1 else start

            stray = pattern.find("}", position, literal_end)
            if stray != -1:
                raise MalformedTemplate(pattern, "unmatched '}'", stray)
            if literal_end > position:
                segments.append(pattern[position:literal_end])
            if start == -1:
                break

            end = pattern.find("}", start + 1)
            if end == -1:
                raise MalformedTemplate(pattern, "unclosed '{'", start)
            nested = pattern.find("{", start + 1, end)
            if nested != -1:
                raise MalformedTemplate(pattern, "nested '{'", nested)

            segments.append(_parse_expression(pattern, pattern[start + 1:end], start))
            position = end + 1

        logger.debug("Parsed URI template %r into %d segments", pattern, len(segments))
        return cls(segments)

    @classmethod
    def of(cls, template: str, variables: Iterable[TemplateVariable] = ()) -> UriTemplate:
        """Cached ``parse`` plus any additional variables."""
        return _parse_cached(template).with_variables(variables)

    def with_variable(self, variable: TemplateVariable) -> UriTemplate:
        """
        Return a new template with ``variable`` appended.

        Names already present are skipped. The variable joins a trailing
        expression with the same operator when that does not change the
        expansion, and a '?' variable turns into '&' once a query exists.

        The new group always goes at the end, so a query variable added to a
        template ending in a fragment (``/x{#f}``) lands inside the fragment
        when expanded. Add query variables before fragment variables.
        """
        if self.has_variable(variable.name):
            logger.debug("Variable %r already part of %r, skipping", variable.name, self._pattern)
            return self

        last = self._segments[-1] if self._segments else None
        trailing = last if isinstance(last, VariableGroup) else None

        if variable.operator.key == "?" and not (trailing and trailing.operator.key == "?") \
                and self._has_query():
            variable = variable.as_continued()

        segments = list(self._segments)
        if trailing and trailing.operator.key == variable.operator.key and trailing.operator.mergeable:
            segments[-1] = VariableGroup(trailing.operator, trailing.variables + (variable,))
        else:
            segments.append(VariableGroup(variable.operator, (variable,)))
        return UriTemplate(segments)

    def with_variables(self, variables: Iterable[TemplateVariable]) -> UriTemplate:
        template = self
        for variable in variables:
            template = template.with_variable(variable)
        return template

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def variables(self) -> Tuple[TemplateVariable, ...]:
        return self._variables

    @property
    def variable_names(self) -> Tuple[str, ...]:
        return tuple(variable.name for variable in self._variables)

    def get_variable(self, name: str) -> Optional[TemplateVariable]:
        for variable in self._variables:
            if variable.name == name:
                return variable
        return None

    def has_variable(self, name: str) -> bool:
        return self.get_variable(name) is not None

    def is_templated(self) -> bool:
        return any(isinstance(segment, VariableGroup) for segment in self._segments)

    def _groups(self) -> Iterable[VariableGroup]:
        return (segment for segment in self._segments if isinstance(segment, VariableGroup))

    def _has_query(self) -> bool:
        for segment in self._segments:
            if isinstance(segment, VariableGroup):
                if segment.operator.key == "?":
                    return True
            elif "?" in segment:
                return True
        return False

    # -------------------------------------------------------------------------
    # Expansion
    # -------------------------------------------------------------------------
    def expand(self, values: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> str:
        """
        Expand the template. Missing variables render nothing.

        Raises:
            UnresolvableVariable: a value cannot be expanded for its variable.
        """
        merged = dict(values or {})
        merged.update(kwargs)
        return "".join(
            segment if isinstance(segment, str) else segment.expand(merged)
            for segment in self._segments
        )

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------
    def __str__(self) -> str:
        return self._pattern

    def __repr__(self) -> str:
        return f"UriTemplate({self._pattern!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UriTemplate):
            return NotImplemented
        return self._pattern == other._pattern

    def __hash__(self) -> int:
        return hash(self._pattern)


_parse_cached = lru_cache(maxsize=settings.URI_TEMPLATE_CACHE_SIZE)(UriTemplate.parse)
