from .iana import IanaLinkRelations
from .link import Link
from .relation import LinkRelation
from .representation import (
    CollectionModel,
    EntityModel,
    PagedModel,
    PageMetadata,
    RepresentationModel,
    SlicedModel,
)
from .template import UriTemplate, VariableGroup
from .variable import TemplateVariable, VariableType

__all__ = [
    "CollectionModel",
    "EntityModel",
    "IanaLinkRelations",
    "Link",
    "LinkRelation",
    "PagedModel",
    "PageMetadata",
    "RepresentationModel",
    "SlicedModel",
    "TemplateVariable",
    "UriTemplate",
    "VariableGroup",
    "VariableType",
]
