from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from enum import Enum as PyEnum
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hypermedia.exceptions import InvalidVariableName, UnresolvableVariable
from hypermedia.utils.encoding import encode_reserved, encode_unreserved

logger = logging.getLogger(__name__)

# varname = varchar *( ["."] varchar ), varchar = ALPHA / DIGIT / "_" / pct-encoded
_VARCHAR = r"(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2})"
VARNAME_PATTERN = re.compile(rf"{_VARCHAR}(?:\.?{_VARCHAR})*")

# Values whose iteration order is undefined or which are not text
_UNORDERED_VALUES = (set, frozenset, bytes, bytearray)


# -----------------------------------------------------------------------------
# Operators (RFC 6570, Appendix A)
# -----------------------------------------------------------------------------
class Operator(NamedTuple):
    key: str
    first: str
    separator: str
    named: bool
    if_empty: str
    allow_reserved: bool

    @property
    def mergeable(self) -> bool:
        """Whether two adjacent groups of this operator can share one expression."""
        return self.key in (".", "/", ";", "?", "&")

    def encode(self, value: str) -> str:
        return encode_reserved(value) if self.allow_reserved else encode_unreserved(value)


OPERATORS: dict[str, Operator] = {
    "":  Operator("",  "",  ",", False, "",  False),
    "+": Operator("+", "",  ",", False, "",  True),
    "#": Operator("#", "#", ",", False, "",  True),
    ".": Operator(".", ".", ".", False, "",  False),
    "/": Operator("/", "/", "/", False, "",  False),
    ";": Operator(";", ";", ";", True,  "",  False),
    "?": Operator("?", "?", "&", True,  "=", False),
    "&": Operator("&", "&", "&", True,  "=", False),
}

# Reserved by RFC 6570 for future extensions
RESERVED_OPERATORS = "=,!@|"


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------
class VariableType(PyEnum):
    """Expansion type of a template variable"""
    SIMPLE = "simple"                                    # {var}
    RESERVED = "reserved"                                # {+var}
    FRAGMENT = "fragment"                                # {#var}
    LABEL = "label"                                      # {.var}
    NAME = "name"                                        # {;var}
    PATH_SEGMENT = "path_segment"                        # {/var}
    PATH_STYLE_PARAMETER = "path_style_parameter"        # {;var}
    REQUEST_PARAM = "request_param"                      # {?var}
    REQUEST_PARAM_CONTINUED = "request_param_continued"  # {&var}
    COMPOSITE = "composite"                              # {var*}
    LIST = "list"                                        # {?var*}
    LIST_CONTINUED = "list_continued"                    # {&var*}

    @property
    def operator(self) -> Operator:
        return OPERATORS[_TYPE_OPERATORS[self]]

    @property
    def is_exploded(self) -> bool:
        return self in _EXPLODED_TYPES

    def is_required(self) -> bool:
        return self in _REQUIRED_TYPES

    @classmethod
    def from_operator(cls, key: str, explode: bool = False) -> VariableType:
        """Type a parsed expression maps to; ``;`` always parses as PATH_STYLE_PARAMETER."""
        if explode and key in _EXPLODED_BY_OPERATOR:
            return _EXPLODED_BY_OPERATOR[key]
        return _TYPES_BY_OPERATOR[key]


_TYPE_OPERATORS = {
    VariableType.SIMPLE: "",
    VariableType.RESERVED: "+",
    VariableType.FRAGMENT: "#",
    VariableType.LABEL: ".",
    VariableType.NAME: ";",
    VariableType.PATH_SEGMENT: "/",
    VariableType.PATH_STYLE_PARAMETER: ";",
    VariableType.REQUEST_PARAM: "?",
    VariableType.REQUEST_PARAM_CONTINUED: "&",
    VariableType.COMPOSITE: "",
    VariableType.LIST: "?",
    VariableType.LIST_CONTINUED: "&",
}

_TYPES_BY_OPERATOR = {
    "": VariableType.SIMPLE,
    "+": VariableType.RESERVED,
    "#": VariableType.FRAGMENT,
    ".": VariableType.LABEL,
    "/": VariableType.PATH_SEGMENT,
    ";": VariableType.PATH_STYLE_PARAMETER,
    "?": VariableType.REQUEST_PARAM,
    "&": VariableType.REQUEST_PARAM_CONTINUED,
}

_EXPLODED_BY_OPERATOR = {
    "": VariableType.COMPOSITE,
    "?": VariableType.LIST,
    "&": VariableType.LIST_CONTINUED,
}

_EXPLODED_TYPES = frozenset(_EXPLODED_BY_OPERATOR.values())

_REQUIRED_TYPES = frozenset({
    VariableType.SIMPLE,
    VariableType.RESERVED,
    VariableType.FRAGMENT,
    VariableType.LABEL,
    VariableType.NAME,
    VariableType.PATH_SEGMENT,
    VariableType.PATH_STYLE_PARAMETER,
})

_CONTINUED_TYPES = {
    VariableType.REQUEST_PARAM: VariableType.REQUEST_PARAM_CONTINUED,
    VariableType.LIST: VariableType.LIST_CONTINUED,
}


# -----------------------------------------------------------------------------
# Value helpers
# -----------------------------------------------------------------------------
def _is_composite(value: Any) -> bool:
    return isinstance(value, (list, tuple, Mapping))


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, PyEnum):
        return str(value.value)
    return str(value)


# -----------------------------------------------------------------------------
# Pydantic Models
# -----------------------------------------------------------------------------
class TemplateVariable(BaseModel):
    """
    A named variable of a URI template.

    Two variables are equal when name and type match; description,
    explode flag and prefix length are informational for equality.
    """
    name: str = Field(
        ...,
        description="Variable name following the RFC 6570 varname grammar"
    )
    type: VariableType = Field(
        VariableType.SIMPLE,
        description="Expansion type, determines operator and required-ness"
    )
    description: Optional[str] = Field(
        None,
        description="Human readable description, never rendered into the template"
    )
    explode: bool = Field(
        False,
        description="Explode modifier ('*') for types without a dedicated exploded form"
    )
    max_length: Optional[int] = Field(
        None,
        ge=1,
        le=9999,
        description="Prefix modifier (':n'), truncates scalar values to n characters"
    )

    model_config = ConfigDict(frozen=True)

    def __init__(
        self,
        name: str,
        type: VariableType = VariableType.SIMPLE,
        description: Optional[str] = None,
        **data: Any,
    ) -> None:
        super().__init__(name=name, type=type, description=description, **data)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not VARNAME_PATTERN.fullmatch(v):
            raise InvalidVariableName(v)
        return v

    @model_validator(mode="after")
    def validate_modifiers(self):
        """Explode and prefix modifiers are mutually exclusive"""
        if self.max_length is not None and self.exploded:
            raise ValueError("A variable cannot carry both explode and prefix modifiers")
        return self

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------
    @classmethod
    def path_variable(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.SIMPLE, description)

    @classmethod
    def reserved(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.RESERVED, description)

    @classmethod
    def fragment(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.FRAGMENT, description)

    @classmethod
    def label(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.LABEL, description)

    @classmethod
    def segment(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.PATH_SEGMENT, description)

    @classmethod
    def path_style_parameter(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.PATH_STYLE_PARAMETER, description)

    @classmethod
    def request_parameter(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.REQUEST_PARAM, description)

    @classmethod
    def request_parameter_continued(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.REQUEST_PARAM_CONTINUED, description)

    @classmethod
    def composite(cls, name: str, description: Optional[str] = None) -> TemplateVariable:
        return cls(name, VariableType.COMPOSITE, description)

    # -------------------------------------------------------------------------
    # Withers
    # -------------------------------------------------------------------------
    def with_description(self, description: Optional[str]) -> TemplateVariable:
        return self.model_copy(update={"description": description})

    def with_explode(self) -> TemplateVariable:
        if self.max_length is not None:
            raise ValueError("A variable cannot carry both explode and prefix modifiers")
        return self.model_copy(update={"explode": True})

    def with_max_length(self, max_length: int) -> TemplateVariable:
        return TemplateVariable(
            self.name, self.type, self.description,
            explode=self.explode, max_length=max_length,
        )

    def as_continued(self) -> TemplateVariable:
        """The '&' form of a '?' variable, used once a query string is already present."""
        if self.type not in _CONTINUED_TYPES:
            return self
        return self.model_copy(update={"type": _CONTINUED_TYPES[self.type]})

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    @property
    def operator(self) -> Operator:
        return self.type.operator

    @property
    def exploded(self) -> bool:
        return self.explode or self.type.is_exploded

    def is_required(self) -> bool:
        return self.type.is_required()

    @property
    def varspec(self) -> str:
        """Name plus modifier as it appears inside an expression."""
        if self.exploded:
            return f"{self.name}*"
        if self.max_length is not None:
            return f"{self.name}:{self.max_length}"
        return self.name

    # -------------------------------------------------------------------------
    # Expansion
    # -------------------------------------------------------------------------
    def expand(self, value: Any) -> str:
        """Expand this variable on its own, including the operator prefix."""
        rendered = self.render(value)
        if rendered is None:
            return ""
        return self.operator.first + rendered

    def render(self, value: Any) -> Optional[str]:
        """
        Render the value without the operator prefix.

        Returns None when the value counts as undefined so the enclosing
        expression can skip it: None, or a list or mapping left empty once
        its None members are dropped.
        """
        if value is None:
            return None
        if isinstance(value, _UNORDERED_VALUES) or isinstance(value, Iterator):
            raise UnresolvableVariable(
                self.name, f"{type(value).__name__} values have no defined expansion order"
            )
        if isinstance(value, Mapping):
            return self._render_mapping(value)
        if isinstance(value, (list, tuple)):
            return self._render_sequence(value)

        text = _stringify(value)
        if self.max_length is not None:
            text = text[:self.max_length]
        return self._named(self.operator.encode(text))

    def _render_sequence(self, value: Any) -> Optional[str]:
        # None members are undefined and skipped
        items = [self._member(item) for item in value if item is not None]
        if not items:
            return None
        self._reject_prefix()
        op = self.operator
        if not self.exploded:
            return self._named(",".join(op.encode(item) for item in items))
        if op.named:
            return op.separator.join(self._named(op.encode(item)) for item in items)
        return op.separator.join(op.encode(item) for item in items)

    def _render_mapping(self, value: Mapping) -> Optional[str]:
        pairs = [(self._member(k), self._member(v)) for k, v in value.items() if v is not None]
        if not pairs:
            return None
        self._reject_prefix()
        op = self.operator
        if not self.exploded:
            return self._named(",".join(f"{op.encode(k)},{op.encode(v)}" for k, v in pairs))
        rendered = []
        for k, v in pairs:
            if op.named and v == "":
                rendered.append(op.encode(k) + op.if_empty)
            else:
                rendered.append(f"{op.encode(k)}={op.encode(v)}")
        return op.separator.join(rendered)

    def _named(self, encoded: str) -> str:
        op = self.operator
        if not op.named:
            return encoded
        if encoded == "":
            return self.name + op.if_empty
        return f"{self.name}={encoded}"

    def _member(self, item: Any) -> str:
        if item is None or _is_composite(item) or isinstance(item, _UNORDERED_VALUES):
            raise UnresolvableVariable(
                self.name, f"composite values must contain scalars, got {type(item).__name__}"
            )
        return _stringify(item)

    def _reject_prefix(self) -> None:
        if self.max_length is not None:
            raise UnresolvableVariable(
                self.name, "prefix modifier cannot be applied to a list or mapping value"
            )

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemplateVariable):
            return NotImplemented
        return (self.name, self.type) == (other.name, other.type)

    def __hash__(self) -> int:
        return hash((self.name, self.type))

    def __str__(self) -> str:
        return "{" + self.operator.key + self.varspec + "}"
