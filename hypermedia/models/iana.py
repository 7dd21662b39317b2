"""Link relations registered with IANA (https://www.iana.org/assignments/link-relations)."""

from __future__ import annotations

from hypermedia.models.relation import LinkRelation

_REGISTERED = (
    "about", "acl", "alternate", "amphtml", "api-catalog", "appendix",
    "apple-touch-icon", "apple-touch-startup-image", "archives", "author",
    "blocked-by", "bookmark", "c2pa-manifest", "canonical", "chapter",
    "cite-as", "collection", "compression-dictionary", "contents",
    "convertedfrom", "copyright", "create-form", "current", "deprecation",
    "describedby", "describes", "disclosure", "dns-prefetch", "duplicate",
    "edit", "edit-form", "edit-media", "enclosure", "external", "first",
    "geofeed", "glossary", "help", "hosts", "hub", "ice-server", "icon",
    "index", "intervalafter", "intervalbefore", "intervalcontains",
    "intervaldisjoint", "intervalduring", "intervalequals",
    "intervalfinishedby", "intervalfinishes", "intervalin", "intervalmeets",
    "intervalmetby", "intervaloverlappedby", "intervaloverlaps",
    "intervalstartedby", "intervalstarts", "item", "last", "latest-version",
    "license", "linkset", "lrdd", "manifest", "mask-icon", "me", "media-feed",
    "memento", "micropub", "modulepreload", "monitor", "monitor-group", "next",
    "next-archive", "nofollow", "noopener", "noreferrer", "opener", "openid2.local_id",
    "openid2.provider", "original", "p3pv1", "payment", "pingback", "preconnect",
    "predecessor-version", "prefetch", "preload", "prerender", "prev",
    "prev-archive", "preview", "previous", "privacy-policy", "profile",
    "publication", "related", "replies", "restconf", "ruleinput", "search",
    "section", "self", "service", "service-desc", "service-doc", "service-meta",
    "sip-trunking-capability", "sponsored", "start", "status", "stylesheet",
    "subsection", "successor-version", "sunset", "tag", "terms-of-service",
    "timegate", "timemap", "type", "ugc", "up", "version-history", "via",
    "webmention", "working-copy", "working-copy-of",
)


class IanaLinkRelations:
    """Well-known relation constants plus membership lookup for the IANA registry."""

    SELF = LinkRelation.of("self")
    NEXT = LinkRelation.of("next")
    PREV = LinkRelation.of("prev")
    PREVIOUS = LinkRelation.of("previous")
    FIRST = LinkRelation.of("first")
    LAST = LinkRelation.of("last")
    ITEM = LinkRelation.of("item")
    COLLECTION = LinkRelation.of("collection")
    UP = LinkRelation.of("up")
    RELATED = LinkRelation.of("related")
    ALTERNATE = LinkRelation.of("alternate")
    DESCRIBEDBY = LinkRelation.of("describedby")
    EDIT = LinkRelation.of("edit")
    EDIT_FORM = LinkRelation.of("edit-form")
    CREATE_FORM = LinkRelation.of("create-form")
    SEARCH = LinkRelation.of("search")
    PROFILE = LinkRelation.of("profile")
    DEPRECATION = LinkRelation.of("deprecation")
    SUNSET = LinkRelation.of("sunset")
    INDEX = LinkRelation.of("index")
    START = LinkRelation.of("start")
    LICENSE = LinkRelation.of("license")
    HELP = LinkRelation.of("help")
    ABOUT = LinkRelation.of("about")

    RELATIONS = frozenset(LinkRelation.of(name) for name in _REGISTERED)

    @classmethod
    def is_known(cls, relation: str | LinkRelation) -> bool:
        if isinstance(relation, str) and not relation.strip():
            return False
        return LinkRelation.of(relation) in cls.RELATIONS
