"""
Unit Tests for Link

Covers construction, withers, templated hrefs and RFC 8288 header rendering.
"""

import pytest
from pydantic import ValidationError

from hypermedia.exceptions import InvalidHref, MalformedLinkHeader, UnresolvableVariable
from hypermedia.models.iana import IanaLinkRelations
from hypermedia.models.link import Link
from hypermedia.models.relation import LinkRelation
from hypermedia.models.template import UriTemplate


class TestLink:
    """Tests for Link construction and value semantics"""

    # ─────────────────────────────────────────────────────────────────────────
    # Constructor Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_of_when_no_rel_then_self(self):
        link = Link.of("/people/42")
        assert link.href == "/people/42"
        assert link.rel == IanaLinkRelations.SELF

    def test_of_when_rel_differs_in_case_then_matches(self):
        link = Link.of("/some-resource", LinkRelation.of("next"))
        assert link.rel == LinkRelation.of("NEXT")
        assert link.has_rel("Next") is True

    def test_of_accepts_string_rel(self):
        assert Link.of("/people", "collection").rel == IanaLinkRelations.COLLECTION

    def test_of_accepts_template(self):
        link = Link.of(UriTemplate.of("/people{?page}"))
        assert link.href == "/people{?page}"

    @pytest.mark.parametrize("href", ["", None])
    def test_of_when_href_empty_then_raises_invalid_href(self, href):
        with pytest.raises(InvalidHref):
            Link.of(href)

    def test_link_is_immutable(self):
        link = Link.of("/people")
        with pytest.raises(ValidationError):
            link.href = "/other"

    def test_eq_when_same_fields_then_equal(self):
        assert Link.of("/people", "NEXT") == Link.of("/people", "next")
        assert Link.of("/people") != Link.of("/people").with_title("People")
        assert len({Link.of("/people"), Link.of("/people")}) == 1

    # ─────────────────────────────────────────────────────────────────────────
    # Wither Tests
    # ─────────────────────────────────────────────────────────────────────────

    @pytest.mark.parametrize("method, field, value", [
        ("with_hreflang", "hreflang", "en"),
        ("with_media", "media", "screen"),
        ("with_title", "title", "People"),
        ("with_type", "type", "application/hal+json"),
        ("with_deprecation", "deprecation", "https://example.com/deprecated"),
        ("with_profile", "profile", "https://example.com/profiles/person"),
        ("with_name", "name", "primary"),
    ])
    def test_with_replaces_one_field_only(self, method, field, value):
        original = Link.of("/people", "collection").with_title("Original")
        changed = getattr(original, method)(value)

        assert getattr(changed, field) == value
        assert changed is not original
        for other in ("href", "rel", "hreflang", "media", "type", "deprecation", "profile", "name", "title"):
            if other != field:
                assert getattr(changed, other) == getattr(original, other)
        if field != "title":
            assert getattr(original, field) is None

    def test_with_rel_returns_copy(self):
        original = Link.of("/people")
        changed = original.with_rel("next")
        assert changed.rel == IanaLinkRelations.NEXT
        assert original.rel == IanaLinkRelations.SELF
        assert changed.with_self_rel().rel == IanaLinkRelations.SELF

    # ─────────────────────────────────────────────────────────────────────────
    # Template Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_is_templated(self):
        assert Link.of("/people{?page,size}").is_templated() is True
        assert Link.of("/people").is_templated() is False

    def test_get_variable_names(self):
        link = Link.of("/people/{id}/orders{?page}")
        assert link.get_variable_names() == ("id", "page")
        assert [v.name for v in link.get_variables()] == ["id", "page"]

    def test_expand_returns_copy_with_expanded_href(self):
        link = Link.of("/people/{id}{?fields}", "item").with_title("Person")
        expanded = link.expand(id=42)
        assert expanded.href == "/people/42"
        assert expanded.rel == IanaLinkRelations.ITEM
        assert expanded.title == "Person"
        assert link.href == "/people/{id}{?fields}"

    def test_expand_when_not_templated_then_href_unchanged(self):
        link = Link.of("/people")
        assert link.expand({"id": 1}) == link

    @pytest.mark.parametrize("href", ["{?page}", "{+base}"])
    def test_expand_when_result_empty_then_raises_invalid_href(self, href):
        with pytest.raises(InvalidHref):
            Link.of(href).expand()

    def test_expand_propagates_unresolvable_variable(self):
        with pytest.raises(UnresolvableVariable):
            Link.of("/people{?tags}").expand(tags={"a"})


class TestLinkHeader:
    """Tests for RFC 8288 rendering and parsing"""

    def test_str_renders_href_and_rel(self):
        assert str(Link.of("/people?page=2", "next")) == '</people?page=2>;rel="next"'

    def test_str_renders_attributes_in_order(self):
        link = Link.of("/people", "collection").with_type("application/json").with_title("All people")
        assert str(link) == '</people>;rel="collection";title="All people";type="application/json"'

    def test_str_escapes_quotes(self):
        link = Link.of("/people").with_title('The "best" people')
        assert str(link) == '</people>;rel="self";title="The \\"best\\" people"'

    def test_value_of_parses_single_link(self):
        link = Link.value_of('</people?page=2>; rel="next"; title="Next page"')
        assert link == Link.of("/people?page=2", "next").with_title("Next page")

    def test_value_of_accepts_unquoted_values(self):
        link = Link.value_of("</people>;rel=collection;hreflang=en")
        assert link.rel == IanaLinkRelations.COLLECTION
        assert link.hreflang == "en"

    def test_value_of_reverses_str(self):
        link = Link.of("/people", "next").with_title('a;b,"c"').with_name("n")
        assert Link.value_of(str(link)) == link

    def test_value_of_ignores_unknown_attributes(self):
        link = Link.value_of('</people>;rel="self";anchor="#x"')
        assert link == Link.of("/people")

    @pytest.mark.parametrize("element, reason", [
        ('/people;rel="self"', "URI-Reference"),
        ("</people>", "missing rel"),
        ('</people>;rel=""', "missing rel"),
        ('<>;rel="self"', "empty"),
    ])
    def test_value_of_when_malformed_then_raises(self, element, reason):
        with pytest.raises(MalformedLinkHeader) as excinfo:
            Link.value_of(element)
        assert reason in excinfo.value.reason

    def test_parse_header_splits_links(self):
        header = '</people?page=0>;rel="first", </people?page=2>;rel="next", </people?page=4>;rel="last"'
        links = Link.parse_header(header)
        assert [str(link.rel) for link in links] == ["first", "next", "last"]
        assert links[1].href == "/people?page=2"

    def test_parse_header_when_comma_inside_quotes_or_href_then_not_split(self):
        header = '</a,b>;rel="self";title="x, y"'
        links = Link.parse_header(header)
        assert len(links) == 1
        assert links[0].href == "/a,b"
        assert links[0].title == "x, y"

    def test_parse_header_when_multiple_relations_then_one_link_each(self):
        links = Link.parse_header('</people>;rel="self collection"')
        assert links == [Link.of("/people", "self"), Link.of("/people", "collection")]
