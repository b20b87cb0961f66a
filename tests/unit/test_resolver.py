"""
Unit tests for RedirectResolver.

Covers:
    - resolve: found -> 302 target, missing/malformed -> LinkNotFound
    - resolve never mutates click counters
    - record_click: success, deleted-link, store outage, unexpected errors
    - visit: redirect survives a failing click recorder
"""

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from shortlink.errors import LinkNotFound, StoreUnavailable
from shortlink.manager.resolver import RedirectResolver, RedirectTarget
from shortlink.models import Link

T0 = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def seeded(storage):
    storage.insert_unique(Link(code="Found01", url="https://target.example/a?b=c", created_at=T0))
    return storage


def test_resolve_found(resolver, seeded):
    target = resolver.resolve("Found01")
    assert target == RedirectTarget(code="Found01", url="https://target.example/a?b=c", status_code=302)


def test_resolve_does_not_count(resolver, seeded):
    resolver.resolve("Found01")
    assert seeded.find_by_code("Found01").total_clicks == 0


@pytest.mark.parametrize("code", ["Missing1", "found01", "FOUND01"])
def test_resolve_missing(resolver, seeded, code):
    with pytest.raises(LinkNotFound) as ei:
        resolver.resolve(code)
    assert ei.value.code == code


@pytest.mark.parametrize("code", ["", "abc", "toolongcode", "../etc", "favicon.ico"])
def test_resolve_malformed_skips_store(storage, code):
    resolver = RedirectResolver(storage)
    with patch.object(storage, "find_by_code") as find:
        with pytest.raises(LinkNotFound):
            resolver.resolve(code)
    find.assert_not_called()


def test_resolve_is_fresh_each_time(resolver, seeded):
    resolver.resolve("Found01")
    seeded.delete_by_code("Found01")
    with pytest.raises(LinkNotFound):
        resolver.resolve("Found01")


def test_record_click_updates_counters(seeded):
    resolver = RedirectResolver(seeded, clock=lambda: T0 + timedelta(minutes=5))
    assert resolver.record_click("Found01") is True
    link = seeded.find_by_code("Found01")
    assert link.total_clicks == 1
    assert link.last_clicked == T0 + timedelta(minutes=5)


def test_record_click_explicit_timestamp(resolver, seeded):
    at = T0 + timedelta(days=1)
    resolver.record_click("Found01", at)
    assert seeded.find_by_code("Found01").last_clicked == at


def test_record_click_on_deleted_link_is_swallowed(resolver, seeded, caplog):
    seeded.delete_by_code("Found01")
    with caplog.at_level(logging.WARNING, logger="shortlink.resolver"):
        assert resolver.record_click("Found01") is False
    assert "no longer exists" in caplog.text


def test_record_click_store_unavailable_is_swallowed(resolver, seeded, caplog):
    with patch.object(seeded, "increment_clicks_and_touch", side_effect=StoreUnavailable("db down")):
        with caplog.at_level(logging.WARNING, logger="shortlink.resolver"):
            assert resolver.record_click("Found01") is False
    assert "db down" in caplog.text


def test_record_click_unexpected_error_is_swallowed(resolver, seeded, caplog):
    with patch.object(seeded, "increment_clicks_and_touch", side_effect=RuntimeError("boom")):
        with caplog.at_level(logging.WARNING, logger="shortlink.resolver"):
            assert resolver.record_click("Found01") is False
    assert "unexpected storage error" in caplog.text


def test_visit_counts_and_redirects(resolver, seeded):
    target = resolver.visit("Found01")
    assert target.url == "https://target.example/a?b=c"
    assert seeded.find_by_code("Found01").total_clicks == 1


def test_visit_redirects_even_if_recording_fails(resolver, seeded):
    with patch.object(seeded, "increment_clicks_and_touch", side_effect=StoreUnavailable()):
        target = resolver.visit("Found01")
    assert target.url == "https://target.example/a?b=c"
    assert seeded.find_by_code("Found01").total_clicks == 0


def test_visit_missing_raises_without_recording(resolver, storage):
    with patch.object(storage, "increment_clicks_and_touch") as inc:
        with pytest.raises(LinkNotFound):
            resolver.visit("Nobody01")
    inc.assert_not_called()
