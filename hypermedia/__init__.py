import logging

from hypermedia.exceptions import (
    HypermediaError,
    InvalidHref,
    InvalidVariableName,
    LinkNotFound,
    MalformedLinkHeader,
    MalformedTemplate,
    MissingPayload,
    UnresolvableVariable,
)
from hypermedia.models import (
    CollectionModel,
    EntityModel,
    IanaLinkRelations,
    Link,
    LinkRelation,
    PagedModel,
    PageMetadata,
    RepresentationModel,
    SlicedModel,
    TemplateVariable,
    UriTemplate,
    VariableGroup,
    VariableType,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "CollectionModel",
    "EntityModel",
    "HypermediaError",
    "IanaLinkRelations",
    "InvalidHref",
    "InvalidVariableName",
    "Link",
    "LinkNotFound",
    "LinkRelation",
    "MalformedLinkHeader",
    "MalformedTemplate",
    "MissingPayload",
    "PagedModel",
    "PageMetadata",
    "RepresentationModel",
    "SlicedModel",
    "TemplateVariable",
    "UnresolvableVariable",
    "UriTemplate",
    "VariableGroup",
    "VariableType",
]
