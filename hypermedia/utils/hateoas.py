from __future__ import annotations

import logging
from typing import Iterable, List, Optional, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from hypermedia.config.settings import settings
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
from hypermedia.models.iana import IanaLinkRelations
from hypermedia.models.link import Link
from hypermedia.models.relation import LinkRelation
from hypermedia.models.representation import PagedModel, PageMetadata, SlicedModel
from hypermedia.models.template import UriTemplate
from hypermedia.models.variable import TemplateVariable

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -----------------------------------------------------------------------------
# Route links
# -----------------------------------------------------------------------------
def link_to(
    request: Request,
    route_name: str,
    rel: str | LinkRelation = IanaLinkRelations.SELF,
    **path_params,
) -> Link:
    """Link to a named route, e.g. ``link_to(request, "get_person", person_id=42)``."""
    return Link.of(str(request.url_for(route_name, **path_params)), rel)


def templated_link_to(
    request: Request,
    route_name: str,
    *query_params: str,
    rel: str | LinkRelation = IanaLinkRelations.SELF,
    **path_params,
) -> Link:
    """Link to a named route advertising optional query parameters as ``{?a,b}``."""
    template = UriTemplate.of(str(request.url_for(route_name, **path_params)))
    template = template.with_variables(
        TemplateVariable.request_parameter(name) for name in query_params
    )
    return Link.of(template, rel)


# -----------------------------------------------------------------------------
# Pagination links
# -----------------------------------------------------------------------------
def pagination_links(
    base: str | UriTemplate,
    metadata: PageMetadata,
    has_next: Optional[bool] = None,
) -> List[Link]:
    """
    Build first/prev/self/next/last links for a page.

    ``has_next`` overrides what the metadata says and is required for
    slices, whose metadata has no totals. Slices never get a ``last`` link.
    """
    template = base if isinstance(base, UriTemplate) else UriTemplate.of(base)
    template = template.with_variables([
        TemplateVariable.request_parameter(settings.PAGE_PARAMETER),
        TemplateVariable.request_parameter(settings.SIZE_PARAMETER),
    ])
    offset = 1 if settings.ONE_INDEXED_PARAMETERS else 0

    def page_link(number: int, rel: LinkRelation) -> Link:
        href = template.expand({
            settings.PAGE_PARAMETER: number + offset,
            settings.SIZE_PARAMETER: metadata.size,
        })
        return Link.of(href, rel)

    if has_next is None:
        has_next = bool(metadata.has_next())
    has_previous = metadata.has_previous()
    navigable = has_previous or has_next

    links: List[Link] = []
    if navigable:
        links.append(page_link(0, IanaLinkRelations.FIRST))
    if has_previous:
        links.append(page_link(metadata.number - 1, IanaLinkRelations.PREV))
    links.append(page_link(metadata.number, IanaLinkRelations.SELF))
    if has_next:
        links.append(page_link(metadata.number + 1, IanaLinkRelations.NEXT))
    if navigable and metadata.total_pages:
        links.append(page_link(metadata.total_pages - 1, IanaLinkRelations.LAST))

    logger.debug("Built %d pagination links for page %d of %s", len(links), metadata.number, template)
    return links


def paged_model(
    request: Request,
    route_name: str,
    contents: Iterable[T],
    metadata: PageMetadata,
    fallback_type: Optional[type] = None,
    **path_params,
) -> PagedModel[T]:
    base = str(request.url_for(route_name, **path_params))
    return PagedModel.of(
        contents, metadata, pagination_links(base, metadata), fallback_type=fallback_type
    )


def sliced_model(
    request: Request,
    route_name: str,
    contents: Iterable[T],
    metadata: PageMetadata,
    has_next: bool = False,
    fallback_type: Optional[type] = None,
    **path_params,
) -> SlicedModel[T]:
    base = str(request.url_for(route_name, **path_params))
    return SlicedModel.of(
        contents, metadata, pagination_links(base, metadata, has_next), fallback_type=fallback_type
    )


# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------
CLIENT_ERRORS = (
    MalformedTemplate,
    InvalidVariableName,
    UnresolvableVariable,
    InvalidHref,
    MalformedLinkHeader,
)
SERVER_ERRORS = (LinkNotFound, MissingPayload)


async def hypermedia_exception_handler(request: Request, exc: HypermediaError) -> JSONResponse:
    status_code = (
        status.HTTP_400_BAD_REQUEST
        if isinstance(exc, CLIENT_ERRORS)
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    if status_code >= 500:
        logger.error("Hypermedia error while handling %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """Map input errors to 400 and violated preconditions to 500."""
    for exc_class in CLIENT_ERRORS + SERVER_ERRORS:
        app.add_exception_handler(exc_class, hypermedia_exception_handler)
