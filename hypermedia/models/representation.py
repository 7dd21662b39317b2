"""
Representation models: payload data paired with hypermedia links.

Models are assembled by a single owner (links added, removed) and then
handed to a renderer that treats them as read-only. There is no internal
locking; concurrent mutation of one instance is the caller's problem.
The payload itself is frozen once the model is constructed.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterable, Iterator, List, Literal, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hypermedia.exceptions import LinkNotFound, MissingPayload
from hypermedia.models.iana import IanaLinkRelations
from hypermedia.models.link import Link
from hypermedia.models.relation import LinkRelation

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound="RepresentationModel")

Links = Union[Link, Iterable[Link]]
Relation = Union[str, LinkRelation]


def _as_links(links: Links) -> Iterable[Link]:
    if isinstance(links, Link):
        return (links,)
    return links


# -----------------------------------------------------------------------------
# Base container
# -----------------------------------------------------------------------------
class RepresentationModel(BaseModel):
    """Ordered, de-duplicated set of links."""
    kind: Literal["representation"] = "representation"
    links: List[Link] = Field(
        default_factory=list,
        description="Links in insertion order; equal links are kept once"
    )

    @field_validator("links")
    @classmethod
    def deduplicate_links(cls, v: List[Link]) -> List[Link]:
        unique: List[Link] = []
        for link in v:
            if link not in unique:
                unique.append(link)
        return unique

    # -------------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------------
    def add(self: M, links: Links) -> M:
        for link in _as_links(links):
            if link in self.links:
                logger.debug("Link %s already present, ignoring", link)
                continue
            self.links.append(link)
        return self

    def add_if(self: M, condition: bool, links: Union[Links, Callable[[], Links]]) -> M:
        """Add ``links`` only when ``condition`` holds; callables are only invoked then."""
        if condition:
            self.add(links() if callable(links) else links)
        return self

    def remove_links(self: M, rel: Optional[Relation] = None) -> M:
        """Remove every link, or only those with the given relation."""
        if rel is None:
            self.links.clear()
            return self
        relation = LinkRelation.of(rel)
        self.links[:] = [link for link in self.links if link.rel != relation]
        return self

    def remove_if(self: M, predicate: Callable[[Link], bool]) -> M:
        self.links[:] = [link for link in self.links if not predicate(link)]
        return self

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------
    def get_links(self, rel: Optional[Relation] = None) -> List[Link]:
        if rel is None:
            return list(self.links)
        relation = LinkRelation.of(rel)
        return [link for link in self.links if link.rel == relation]

    def get_link(self, rel: Relation) -> Optional[Link]:
        links = self.get_links(rel)
        return links[0] if links else None

    def get_required_link(self, rel: Relation) -> Link:
        link = self.get_link(rel)
        if link is None:
            raise LinkNotFound(str(rel))
        return link

    def has_link(self, rel: Relation) -> bool:
        return self.get_link(rel) is not None

    def has_links(self) -> bool:
        return bool(self.links)


# -----------------------------------------------------------------------------
# Single payload
# -----------------------------------------------------------------------------
class EntityModel(RepresentationModel, Generic[T]):
    """Exactly one payload value plus links."""
    kind: Literal["entity"] = "entity"
    content: T = Field(
        ...,
        frozen=True,
        description="Wrapped domain object, never None"
    )

    @field_validator("content", mode="before")
    @classmethod
    def require_content(cls, v):
        if v is None:
            raise MissingPayload()
        return v

    @classmethod
    def of(cls, content: T, *links: Links) -> EntityModel[T]:
        if content is None:
            raise MissingPayload()
        model = cls(content=content)
        for link in links:
            model.add(link)
        return model

    def get_content(self) -> T:
        return self.content


# -----------------------------------------------------------------------------
# Collections
# -----------------------------------------------------------------------------
class CollectionModel(RepresentationModel, Generic[T]):
    """
    Zero or more payload elements plus links.

    ``element_type`` names the nominal element type so renderers can still
    describe an empty collection. It comes from the first element at
    construction, or from ``empty(element_type)`` or ``with_fallback_type``
    when there is no element to look at.
    """
    kind: Literal["collection"] = "collection"
    content: Tuple[T, ...] = Field(
        (),
        frozen=True,
        description="Elements in the iteration order of the source collection"
    )
    element_type: Optional[type] = Field(
        None,
        frozen=True,
        exclude=True,
        description="Nominal element type, kept even when content is empty"
    )

    @model_validator(mode="before")
    @classmethod
    def infer_element_type(cls, data: Any) -> Any:
        """The first element decides the type unless one is given explicitly."""
        if isinstance(data, dict) and data.get("element_type") is None \
                and data.get("content") is not None:
            content = tuple(data["content"])
            data = {**data, "content": content}
            if content:
                data["element_type"] = type(content[0])
        return data

    @classmethod
    def of(cls, contents: Iterable[T], *links: Links, fallback_type: Optional[type] = None):
        content = tuple(contents)
        element_type = type(content[0]) if content else fallback_type
        model = cls(content=content, element_type=element_type)
        for link in links:
            model.add(link)
        return model

    @classmethod
    def empty(cls, element_type: Optional[type] = None):
        return cls.of((), fallback_type=element_type)

    def with_fallback_type(self, element_type: type):
        """Attach ``element_type`` unless a type is already known; links are copied."""
        if self.element_type is not None:
            logger.debug(
                "Element type %s already set, ignoring fallback %s",
                self.element_type.__name__, element_type.__name__,
            )
            return self
        return self.model_copy(update={"element_type": element_type, "links": list(self.links)})

    def get_content(self) -> List[T]:
        return list(self.content)

    def __iter__(self) -> Iterator[T]:
        return iter(self.content)

    def __len__(self) -> int:
        return len(self.content)


# -----------------------------------------------------------------------------
# Pagination
# -----------------------------------------------------------------------------
def page_count(total_elements: int, size: int) -> int:
    if size == 0:
        return 0
    return -(-total_elements // size)


class PageMetadata(BaseModel):
    """Position of a page within a result set; totals are absent for slices."""
    size: int = Field(
        ...,
        ge=0,
        description="Requested page size"
    )
    number: int = Field(
        ...,
        ge=0,
        description="Zero-based page number"
    )
    total_elements: Optional[int] = Field(
        None,
        ge=0,
        description="Total number of elements across all pages"
    )
    total_pages: Optional[int] = Field(
        None,
        ge=0,
        description="Total number of pages, derived from total_elements and size when omitted"
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def derive_total_pages(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("total_pages") is None \
                and data.get("total_elements") is not None and data.get("size") is not None:
            size = int(data["size"])
            total_elements = int(data["total_elements"])
            if size >= 0 and total_elements >= 0:
                data = {**data, "total_pages": page_count(total_elements, size)}
        return data

    @model_validator(mode="after")
    def validate_totals(self):
        if self.total_pages is None:
            return self
        if self.total_elements is None:
            raise ValueError("total_pages requires total_elements")
        expected = page_count(self.total_elements, self.size)
        if self.total_pages != expected:
            raise ValueError(
                f"total_pages={self.total_pages} is inconsistent with "
                f"total_elements={self.total_elements} and size={self.size} (expected {expected})"
            )
        return self

    @classmethod
    def for_slice(cls, size: int, number: int) -> PageMetadata:
        return cls(size=size, number=number)

    def has_previous(self) -> bool:
        return self.number > 0

    def has_next(self) -> Optional[bool]:
        """None when the total is unknown (slices)."""
        if self.total_pages is None:
            return None
        return self.number + 1 < self.total_pages


class _PaginatedModel(CollectionModel[T], Generic[T]):
    metadata: Optional[PageMetadata] = Field(
        None,
        frozen=True,
        description="Pagination information, None for an empty model without paging context"
    )

    @classmethod
    def of(
        cls,
        contents: Iterable[T],
        metadata: Optional[PageMetadata] = None,
        *links: Links,
        fallback_type: Optional[type] = None,
    ):
        content = tuple(contents)
        element_type = type(content[0]) if content else fallback_type
        model = cls(content=content, element_type=element_type, metadata=metadata)
        for link in links:
            model.add(link)
        return model

    @classmethod
    def empty(cls, element_type: Optional[type] = None, metadata: Optional[PageMetadata] = None):
        return cls.of((), metadata, fallback_type=element_type)

    def get_metadata(self) -> Optional[PageMetadata]:
        return self.metadata

    def get_next_link(self) -> Optional[Link]:
        return self.get_link(IanaLinkRelations.NEXT)

    def get_previous_link(self) -> Optional[Link]:
        return self.get_link(IanaLinkRelations.PREV)


class PagedModel(_PaginatedModel[T], Generic[T]):
    """Collection page with total counts."""
    kind: Literal["paged"] = "paged"


class SlicedModel(_PaginatedModel[T], Generic[T]):
    """Collection slice without total counts (open-ended, e.g. cursor based)."""
    kind: Literal["sliced"] = "sliced"

    @field_validator("metadata")
    @classmethod
    def reject_totals(cls, v: Optional[PageMetadata]) -> Optional[PageMetadata]:
        if v is not None and (v.total_elements is not None or v.total_pages is not None):
            raise ValueError("Slice metadata cannot carry total counts")
        return v
