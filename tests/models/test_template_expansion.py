"""
Unit Tests for UriTemplate expansion

Expected values are taken from the examples in RFC 6570, section 3.2.
"""

import pytest

from hypermedia.exceptions import UnresolvableVariable
from hypermedia.models.template import UriTemplate


@pytest.mark.parametrize("pattern, expected", [
    # Level 1
    ("{var}", "value"),
    ("{hello}", "Hello%20World%21"),
    ("{half}", "50%25"),
    ("O{empty}X", "OX"),
    ("O{undef}X", "OX"),
    # Level 2
    ("{+var}", "value"),
    ("{+hello}", "Hello%20World!"),
    ("{+half}", "50%25"),
    ("{base}index", "http%3A%2F%2Fexample.com%2Fhome%2Findex"),
    ("{+base}index", "http://example.com/home/index"),
    ("{+path}/here", "/foo/bar/here"),
    ("here?ref={+path}", "here?ref=/foo/bar"),
    ("{#var}", "#value"),
    ("{#hello}", "#Hello%20World!"),
    ("X{#undef}", "X"),
    # Level 3
    ("map?{x,y}", "map?1024,768"),
    ("{x,hello,y}", "1024,Hello%20World%21,768"),
    ("{+x,hello,y}", "1024,Hello%20World!,768"),
    ("{+path,x}/here", "/foo/bar,1024/here"),
    ("{#x,hello,y}", "#1024,Hello%20World!,768"),
    ("X{.var}", "X.value"),
    ("X{.x,y}", "X.1024.768"),
    ("{/var}", "/value"),
    ("{/var,x}/here", "/value/1024/here"),
    ("{;x,y}", ";x=1024;y=768"),
    ("{;x,y,empty}", ";x=1024;y=768;empty"),
    ("{?x,y}", "?x=1024&y=768"),
    ("{?x,y,empty}", "?x=1024&y=768&empty="),
    ("?fixed=yes{&x}", "?fixed=yes&x=1024"),
    ("{&x,y,empty}", "&x=1024&y=768&empty="),
    ("{?undef}", ""),
    ("{x,undef,y}", "1024,768"),
    # Level 4
    ("{var:3}", "val"),
    ("{var:30}", "value"),
    ("{list}", "red,green,blue"),
    ("{list*}", "red,green,blue"),
    ("{keys}", "semi,%3B,dot,.,comma,%2C"),
    ("{keys*}", "semi=%3B,dot=.,comma=%2C"),
    ("{+path:6}/here", "/foo/b/here"),
    ("{+list}", "red,green,blue"),
    ("{+list*}", "red,green,blue"),
    ("{+keys}", "semi,;,dot,.,comma,,"),
    ("{+keys*}", "semi=;,dot=.,comma=,"),
    ("{#path:6}/here", "#/foo/b/here"),
    ("{#list*}", "#red,green,blue"),
    ("{#keys*}", "#semi=;,dot=.,comma=,"),
    ("X{.var:3}", "X.val"),
    ("X{.list}", "X.red,green,blue"),
    ("X{.list*}", "X.red.green.blue"),
    ("X{.keys*}", "X.semi=%3B.dot=..comma=%2C"),
    ("X{.empty_keys}", "X"),
    ("www{.dom*}", "www.example.com"),
    ("{/var:1,var}", "/v/value"),
    ("{/list}", "/red,green,blue"),
    ("{/list*}", "/red/green/blue"),
    ("{/list*,path:4}", "/red/green/blue/%2Ffoo"),
    ("{/keys*}", "/semi=%3B/dot=./comma=%2C"),
    ("{;hello:5}", ";hello=Hello"),
    ("{;list}", ";list=red,green,blue"),
    ("{;list*}", ";list=red;list=green;list=blue"),
    ("{;keys}", ";keys=semi,%3B,dot,.,comma,%2C"),
    ("{;keys*}", ";semi=%3B;dot=.;comma=%2C"),
    ("{;v,empty,who}", ";v=6;empty;who=fred"),
    ("{?var:3}", "?var=val"),
    ("{?list}", "?list=red,green,blue"),
    ("{?list*}", "?list=red&list=green&list=blue"),
    ("{?keys}", "?keys=semi,%3B,dot,.,comma,%2C"),
    ("{?keys*}", "?semi=%3B&dot=.&comma=%2C"),
    ("{&var:3}", "&var=val"),
    ("{&list*}", "&list=red&list=green&list=blue"),
    ("{&keys*}", "&semi=%3B&dot=.&comma=%2C"),
    ("{count}", "one,two,three"),
    ("{/count*}", "/one/two/three"),
    ("{?v,undef,who}", "?v=6&who=fred"),
    ("{dub}", "me%2Ftoo"),
    ("{+dub}", "me/too"),
    ("{?empty_keys}", ""),
])
def test_expand_rfc6570_examples(rfc_values, pattern, expected):
    assert UriTemplate.parse(pattern).expand(rfc_values) == expected


class TestUriTemplateExpand:
    """Tests for UriTemplate.expand beyond the RFC examples"""

    # ─────────────────────────────────────────────────────────────────────────
    # Scenario Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_expand_when_optional_parameter_absent_then_omitted(self):
        template = UriTemplate.of("/{segment}/something{?parameter}")
        assert template.expand({"segment": "people"}) == "/people/something"
        assert template.expand({"segment": "people", "parameter": None}) == "/people/something"

    def test_expand_when_optional_parameter_present_then_rendered(self):
        template = UriTemplate.of("/{segment}/something{?parameter}")
        assert template.expand({"segment": "people", "parameter": "42"}) == "/people/something?parameter=42"

    def test_expand_when_required_variable_absent_then_renders_nothing(self):
        assert UriTemplate.of("/people/{id}/orders").expand() == "/people//orders"

    def test_expand_when_not_templated_then_returns_pattern(self):
        assert UriTemplate.of("/people?sort=name").expand(sort="ignored") == "/people?sort=name"

    def test_expand_when_kwargs_and_mapping_then_kwargs_win(self):
        template = UriTemplate.of("/people/{id}")
        assert template.expand({"id": 1}, id=2) == "/people/2"

    def test_expand_when_first_query_variable_absent_then_next_takes_prefix(self):
        template = UriTemplate.of("/people{?page,size}")
        assert template.expand(size=20) == "/people?size=20"

    def test_expand_when_non_string_scalars_then_stringified(self):
        template = UriTemplate.of("/people{?page,active}")
        assert template.expand(page=0, active=False) == "/people?page=0&active=false"

    def test_expand_when_tuple_then_treated_as_list(self):
        assert UriTemplate.of("{/path*}").expand(path=("a", "b")) == "/a/b"

    def test_expand_when_explode_empty_value_on_named_map_then_if_empty_applies(self):
        template = UriTemplate.of("{?filter*}")
        assert template.expand(filter={"name": "", "age": "30"}) == "?name=&age=30"
        template = UriTemplate.of("{;filter*}")
        assert template.expand(filter={"name": "", "age": "30"}) == ";name;age=30"

    def test_expand_when_mapping_has_undefined_values_then_skipped(self):
        assert UriTemplate.parse("{?keys*}").expand(keys={"a": None, "b": "x"}) == "?b=x"
        assert UriTemplate.parse("{?keys}").expand(keys={"a": None, "b": "x"}) == "?keys=b,x"

    def test_expand_when_mapping_values_all_undefined_then_expression_omitted(self):
        assert UriTemplate.parse("/p{?keys*}").expand(keys={"a": None}) == "/p"

    def test_expand_when_list_has_undefined_members_then_skipped(self):
        assert UriTemplate.of("{/path*}").expand(path=["a", None, "b"]) == "/a/b"
        assert UriTemplate.of("X{.list}").expand(list=[None, None]) == "X"

    def test_expand_when_reserved_keeps_pct_triplets(self):
        assert UriTemplate.of("{+v}").expand(v="a%20b%zz") == "a%20b%25zz"

    def test_expand_when_unicode_then_utf8_encoded(self):
        assert UriTemplate.of("{v}").expand(v="ü") == "%C3%BC"

    # ─────────────────────────────────────────────────────────────────────────
    # Error Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_expand_when_prefix_on_list_then_raises(self):
        with pytest.raises(UnresolvableVariable) as excinfo:
            UriTemplate.of("{list:3}").expand(list=["red", "green"])
        assert excinfo.value.name == "list"

    def test_expand_when_nested_mapping_then_raises(self):
        with pytest.raises(UnresolvableVariable):
            UriTemplate.of("{?filter*}").expand(filter={"a": {"b": "c"}})

    def test_expand_when_set_value_then_raises(self):
        with pytest.raises(UnresolvableVariable):
            UriTemplate.of("{?tags}").expand(tags={"a", "b"})

    def test_expand_when_list_contains_nested_list_then_raises(self):
        with pytest.raises(UnresolvableVariable):
            UriTemplate.of("{/path*}").expand(path=["a", ["b"]])
