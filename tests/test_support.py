"""
Tests for events, import helpers and logging setup
"""
import asyncio
import json
import logging

import pytest

from sitebridge.exceptions import ConfigurationError
from sitebridge.main import startup_banner
from sitebridge.services.events import EventDispatcher
from sitebridge.utils.imports import import_string
from sitebridge.utils.logging import SiteFilter, StructuredFormatter


class TestEventDispatcher:
    def test_sync_and_async_listeners(self):
        events = EventDispatcher()
        seen = []

        async def async_listener(payload):
            seen.append(("async", payload))
            return "a"

        events.listen("ping", lambda payload: seen.append(("sync", payload)))
        events.listen("ping", async_listener)

        results = asyncio.run(events.dispatch("ping", 1))
        assert seen == [("sync", 1), ("async", 1)]
        assert results == [None, "a"]

    def test_failures_are_isolated(self):
        events = EventDispatcher()

        def broken(payload):
            raise ValueError("boom")

        events.listen("ping", broken)
        events.listen("ping", lambda payload: "ok")
        assert asyncio.run(events.dispatch("ping", None)) == [None, "ok"]

    def test_unknown_event(self):
        events = EventDispatcher()
        assert not events.has_listeners("ping")
        assert asyncio.run(events.dispatch("ping", None)) == []


class TestImportString:
    def test_colon_and_dot_forms(self):
        assert import_string("sitebridge.services.events:EventDispatcher") is EventDispatcher
        assert import_string("sitebridge.services.events.EventDispatcher") is EventDispatcher

    @pytest.mark.parametrize("identifier", [
        "nothing",
        "sitebridge.nowhere:Thing",
        "sitebridge.services.events:Missing",
    ])
    def test_bad_identifiers(self, identifier):
        with pytest.raises(ConfigurationError):
            import_string(identifier)


class TestLogging:
    def test_site_filter_outside_request(self):
        record = logging.LogRecord("sitebridge", logging.INFO, __file__, 1, "hello", None, None)
        assert SiteFilter().filter(record)
        assert record.site == "-"

    def test_structured_formatter(self):
        record = logging.LogRecord("sitebridge", logging.INFO, __file__, 1, "hello %s", ("foo",), None)
        record.site = "foo"
        data = json.loads(StructuredFormatter().format(record))
        assert data["message"] == "hello foo"
        assert data["site"] == "foo"
        assert data["level"] == "INFO"


class TestStartupBanner:
    def test_lists_sites_from_the_loaded_registry(self, settings, registry):
        lines = startup_banner(settings, registry)

        assert "Main domain: main.example.com" in lines
        assert "Sites configured: 4" in lines
        assert "   • foo (foo.example.com, www.foo.example.com)" in lines
        assert "   • dead ()" in lines
