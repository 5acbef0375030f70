"""Unit tests for the preview cache."""

import os
import time

import pytest

from restex.contexts.rendering.cache import PreviewCache


@pytest.mark.unit
def test_key_depends_on_source_and_content():
    key = PreviewCache.key("source", "content")

    assert key == PreviewCache.key("source", "content")
    assert key != PreviewCache.key("source", "other")
    assert key != PreviewCache.key("other", "content")
    assert len(key) == 32


@pytest.mark.unit
def test_put_then_get(tmp_path):
    cache = PreviewCache(tmp_path / "cache")
    key = cache.key("source")

    assert cache.get(key) is None
    cache.put(key, b"%PDF-1.4")
    assert cache.get(key) == b"%PDF-1.4"


@pytest.mark.unit
def test_expired_entry_is_evicted_on_read(tmp_path):
    cache = PreviewCache(tmp_path, ttl=3600)
    key = cache.key("source")
    path = cache.put(key, b"%PDF-1.4")

    two_hours_ago = time.time() - 7200
    os.utime(path, (two_hours_ago, two_hours_ago))

    assert cache.get(key) is None
    assert not path.exists()


@pytest.mark.unit
def test_injected_clock_controls_expiry(tmp_path):
    cache = PreviewCache(tmp_path, ttl=60, clock=lambda: time.time() + 120)
    key = cache.key("source")
    cache.put(key, b"%PDF-1.4")

    assert cache.get(key) is None


@pytest.mark.unit
def test_evict_expired(tmp_path):
    cache = PreviewCache(tmp_path, ttl=60)
    old = cache.put(cache.key("old"), b"old")
    cache.put(cache.key("new"), b"new")
    long_ago = time.time() - 3600
    os.utime(old, (long_ago, long_ago))

    assert cache.evict_expired() == 1
    assert cache.get(cache.key("new")) == b"new"
    assert PreviewCache(tmp_path / "absent").evict_expired() == 0


@pytest.mark.unit
def test_key_parts_do_not_run_together():
    assert PreviewCache.key("ab", "c") != PreviewCache.key("a", "bc")
