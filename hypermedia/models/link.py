from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hypermedia.exceptions import InvalidHref, MalformedLinkHeader
from hypermedia.models.iana import IanaLinkRelations
from hypermedia.models.relation import LinkRelation
from hypermedia.models.template import UriTemplate
from hypermedia.models.variable import TemplateVariable

logger = logging.getLogger(__name__)

# Target attributes in rendering order (RFC 8288, section 3.4)
LINK_ATTRIBUTES = ("hreflang", "media", "title", "type", "deprecation", "profile", "name")

_LINK_VALUE = re.compile(r"\s*<(?P<href>[^>]*)>\s*(?P<params>.*)", re.DOTALL)


# -----------------------------------------------------------------------------
# Header helpers
# -----------------------------------------------------------------------------
def _split_outside_quotes(text: str, delimiter: str) -> List[str]:
    """Split on ``delimiter`` unless it sits inside a quoted string or ``<...>``."""
    parts, current = [], []
    quoted = escaped = bracketed = False
    for char in text:
        if escaped:
            escaped = False
        elif quoted and char == "\\":
            escaped = True
        elif char == '"' and not bracketed:
            quoted = not quoted
        elif char == "<" and not quoted:
            bracketed = True
        elif char == ">" and not quoted:
            bracketed = False
        elif char == delimiter and not quoted and not bracketed:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return re.sub(r"\\(.)", r"\1", value[1:-1])
    return value


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


# -----------------------------------------------------------------------------
# Pydantic Models
# -----------------------------------------------------------------------------
class Link(BaseModel):
    """
    Immutable hypermedia link.

    Every ``with_*`` method returns a new Link with exactly one field
    replaced; the receiver is never modified.
    """
    href: str = Field(
        ...,
        description="Target URI, possibly a URI template",
        examples=["/people/42", "/people{?page,size}"]
    )
    rel: LinkRelation = Field(
        IanaLinkRelations.SELF,
        description="Relation of the target to the current resource"
    )
    hreflang: Optional[str] = Field(
        None,
        description="Language of the target resource"
    )
    media: Optional[str] = Field(
        None,
        description="Media query the target is designed for"
    )
    title: Optional[str] = Field(
        None,
        description="Human readable label for the link"
    )
    type: Optional[str] = Field(
        None,
        description="Media type hint of the target resource"
    )
    deprecation: Optional[str] = Field(
        None,
        description="URI describing the deprecation of this link"
    )
    profile: Optional[str] = Field(
        None,
        description="Profile URI the target resource conforms to"
    )
    name: Optional[str] = Field(
        None,
        description="Secondary key to select links sharing a relation"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("href", mode="before")
    @classmethod
    def validate_href(cls, v):
        if isinstance(v, UriTemplate):
            v = str(v)
        if v is None or v == "":
            raise InvalidHref(v)
        return v

    @field_validator("rel", mode="before")
    @classmethod
    def coerce_rel(cls, v):
        if isinstance(v, str):
            return LinkRelation.of(v)
        return v

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------
    @classmethod
    def of(cls, href: str | UriTemplate, rel: str | LinkRelation = IanaLinkRelations.SELF) -> Link:
        return cls(href=href, rel=rel)

    @classmethod
    def value_of(cls, element: str) -> Link:
        """Parse a single RFC 8288 link-value such as ``</people?page=2>;rel="next"``."""
        match = _LINK_VALUE.fullmatch(element)
        if not match:
            raise MalformedLinkHeader(element, "link-value must start with <URI-Reference>")

        attributes: dict[str, str] = {}
        for param in _split_outside_quotes(match.group("params"), ";"):
            if not param.strip():
                continue
            key, _, raw = param.partition("=")
            key = key.strip().lower()
            if key == "rel" or key in LINK_ATTRIBUTES:
                attributes.setdefault(key, _unquote(raw))
            else:
                logger.debug("Ignoring link attribute %r in %r", key, element)

        if not attributes.get("rel", "").strip():
            raise MalformedLinkHeader(element, "missing rel attribute")
        if not match.group("href"):
            raise MalformedLinkHeader(element, "empty URI-Reference")
        return cls(href=match.group("href"), **attributes)

    @classmethod
    def parse_header(cls, header: str) -> List[Link]:
        """Parse a full ``Link`` header; a multi-valued rel yields one Link per relation."""
        links: List[Link] = []
        for element in _split_outside_quotes(header, ","):
            if not element.strip():
                continue
            link = cls.value_of(element)
            links.extend(link.with_rel(rel) for rel in link.rel.value.split())
        return links

    # -------------------------------------------------------------------------
    # Withers
    # -------------------------------------------------------------------------
    def _with(self, **changes: Any) -> Link:
        return self.model_copy(update=changes)

    def with_rel(self, rel: str | LinkRelation) -> Link:
        return self._with(rel=LinkRelation.of(rel))

    def with_self_rel(self) -> Link:
        return self._with(rel=IanaLinkRelations.SELF)

    def with_hreflang(self, hreflang: Optional[str]) -> Link:
        return self._with(hreflang=hreflang)

    def with_media(self, media: Optional[str]) -> Link:
        return self._with(media=media)

    def with_title(self, title: Optional[str]) -> Link:
        return self._with(title=title)

    def with_type(self, type: Optional[str]) -> Link:
        return self._with(type=type)

    def with_deprecation(self, deprecation: Optional[str]) -> Link:
        return self._with(deprecation=deprecation)

    def with_profile(self, profile: Optional[str]) -> Link:
        return self._with(profile=profile)

    def with_name(self, name: Optional[str]) -> Link:
        return self._with(name=name)

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------
    def get_template(self) -> UriTemplate:
        # UriTemplate.of caches per href, so repeated checks do not re-parse
        return UriTemplate.of(self.href)

    def is_templated(self) -> bool:
        return self.get_template().is_templated()

    def get_variables(self) -> Tuple[TemplateVariable, ...]:
        return self.get_template().variables

    def get_variable_names(self) -> Tuple[str, ...]:
        return self.get_template().variable_names

    def expand(self, values: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> Link:
        """
        Return a copy whose href is the expanded template.

        Raises:
            InvalidHref: the expansion is empty, e.g. ``{+base}`` without values.
        """
        href = self.get_template().expand(values, **kwargs)
        if not href:
            raise InvalidHref(href)
        return self._with(href=href)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def has_rel(self, rel: str | LinkRelation) -> bool:
        return self.rel == LinkRelation.of(rel)

    def __str__(self) -> str:
        parts = [f"<{self.href}>", f"rel={_quote(self.rel.value)}"]
        for attribute in LINK_ATTRIBUTES:
            value = getattr(self, attribute)
            if value is not None:
                parts.append(f"{attribute}={_quote(value)}")
        return ";".join(parts)
