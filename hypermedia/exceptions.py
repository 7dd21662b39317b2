from __future__ import annotations

from typing import Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------
class HypermediaError(Exception):
    """Base class for every error raised by the hypermedia package."""


# -----------------------------------------------------------------------------
# URI templates
# -----------------------------------------------------------------------------
class MalformedTemplate(HypermediaError):
    """Template string does not follow the URI template grammar."""

    def __init__(self, template: str, reason: str, position: Optional[int] = None) -> None:
        self.template = template
        self.reason = reason
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"Malformed URI template {template!r}{where}: {reason}")


class InvalidVariableName(HypermediaError):
    """Variable name is empty or contains characters outside the varname grammar."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid template variable name {name!r}")


class UnresolvableVariable(HypermediaError):
    """Value shape cannot be expanded for the variable it was given to."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Cannot expand variable {name!r}: {reason}")


# -----------------------------------------------------------------------------
# Links
# -----------------------------------------------------------------------------
class InvalidHref(HypermediaError):
    """Link href is missing or empty."""

    def __init__(self, href: Optional[str]) -> None:
        self.href = href
        super().__init__(f"Link href must not be empty (got {href!r})")


class MalformedLinkHeader(HypermediaError):
    """RFC 8288 link-value could not be parsed."""

    def __init__(self, header: str, reason: str) -> None:
        self.header = header
        self.reason = reason
        super().__init__(f"Malformed link header {header!r}: {reason}")


class LinkNotFound(HypermediaError):
    """A required link relation is not present on a model."""

    def __init__(self, rel: str) -> None:
        self.rel = rel
        super().__init__(f"No link with rel {rel!r} found")


# -----------------------------------------------------------------------------
# Representation models
# -----------------------------------------------------------------------------
class MissingPayload(HypermediaError):
    """EntityModel created without content."""

    def __init__(self) -> None:
        super().__init__("EntityModel content must not be None")
