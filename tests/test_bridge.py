"""
Tests for beacon rendering and HTML injection
"""
import pytest

from sitebridge.exceptions import SiteNotFoundError
from sitebridge.services.bridge import SessionBridge, inject_before_body_end, is_html
from sitebridge.services.urls import UrlGenerator
from sitebridge.services.views import ViewRenderer


@pytest.fixture
def urls():
    generator = UrlGenerator(scheme="https")
    generator.defaults({"__site_foo": "foo.example.com", "__site_bar": "bar.example.com"})
    return generator


@pytest.fixture
def bridge(encrypter):
    return SessionBridge(encrypter=encrypter, renderer=ViewRenderer())


class TestInjection:
    def test_inserts_before_first_body_end(self):
        html = "<body>a</body><!-- </body> -->"
        assert inject_before_body_end(html, "X") == "<body>aX\n</body><!-- </body> -->"

    def test_no_body_end_is_a_no_op(self):
        assert inject_before_body_end("<p>hi</p>", "X") == "<p>hi</p>"

    def test_match_is_case_sensitive(self):
        assert inject_before_body_end("<BODY>a</BODY>", "X") == "<BODY>a</BODY>"

    @pytest.mark.parametrize("content_type, expected", [
        ("text/html", True),
        ("text/html; charset=utf-8", True),
        ("TEXT/HTML", True),
        ("application/json", False),
        ("text/plain", False),
        (None, False),
        ("", False),
    ])
    def test_is_html(self, content_type, expected):
        assert is_html(content_type) is expected


class TestSessionBridge:
    def test_one_beacon_per_sibling(self, bridge, urls, registry, encrypter):
        siblings = [registry.by_slug("foo"), registry.by_slug("bar")]
        beacons = bridge.beacons(siblings, "sess123", urls)

        assert [beacon.site.name for beacon in beacons] == ["foo", "bar"]
        assert beacons[0].url.startswith("https://foo.example.com/_sitebridge/beacon.gif?s_code=")
        assert beacons[1].url.startswith("https://bar.example.com/_sitebridge/beacon.gif?s_code=")

    def test_inject_renders_hidden_images(self, bridge, urls, registry):
        html = bridge.inject("<html><body></body></html>", [registry.by_slug("bar")], "sess123", urls)
        assert html.count("<img") == 1
        assert 'style="display:none"' in html
        assert 'data-site="bar"' in html

    def test_view_context_reaches_the_template(self, bridge, urls, registry):
        context = {"__site": registry.by_slug("foo")}
        html = bridge.inject("<body></body>", [registry.by_slug("bar")], "sess123", urls, context)
        assert 'data-origin="foo"' in html

    def test_without_view_context_no_origin_is_rendered(self, bridge, urls, registry):
        html = bridge.inject("<body></body>", [registry.by_slug("bar")], "sess123", urls)
        assert "data-origin" not in html

    def test_no_siblings_leaves_html_alone(self, bridge, urls):
        html = "<html><body></body></html>"
        assert bridge.inject(html, [], "sess123", urls) == html

    def test_custom_query_param(self, encrypter, urls, registry):
        bridge = SessionBridge(encrypter=encrypter, renderer=ViewRenderer(), query_param="sso", beacon_path="/sso")
        beacon = bridge.beacons([registry.by_slug("foo")], "sess123", urls)[0]
        assert beacon.url.startswith("https://foo.example.com/sso?sso=")


class TestUrlGenerator:
    def test_site_url(self, urls):
        assert urls.site_url("foo", "/a/b", x="1") == "https://foo.example.com/a/b?x=1"

    def test_unknown_site(self, urls):
        with pytest.raises(SiteNotFoundError):
            urls.site_url("nope")

    def test_defaults_are_copied(self, urls):
        urls.get_defaults()["__site_foo"] = "evil.example.com"
        assert urls.domain_for("foo") == "foo.example.com"


class TestViewRenderer:
    def test_extra_search_path_takes_precedence(self, tmp_path):
        (tmp_path / "beacons.html").write_text("custom {{ beacons|length }}")
        renderer = ViewRenderer(search_paths=[tmp_path])
        assert renderer.render("beacons.html", {}, beacons=[1, 2]) == "custom 2"

    def test_context_and_values_are_merged(self, tmp_path):
        (tmp_path / "title.html").write_text("{{ __site }} {{ page }}")
        renderer = ViewRenderer(search_paths=[tmp_path])
        assert renderer.render("title.html", {"__site": "Foo", "page": "a"}, page="b") == "Foo b"
