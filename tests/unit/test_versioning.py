"""Unit tests for tag parsing and release classification."""

import itertools

import pytest

from utils.release_models import Disposition
from utils.versioning import (
    SENTINEL_VERSION, InvalidVersionError, classify, is_release, is_rerelease,
    is_rollback, parse_version, strip_tag_prefix,
)

TAGS = ["v0.0.0", "v0.1.0", "v1.0.0-alpha", "v1.0.0-rc.1", "v1.0.0", "v1.4.0", "v1.10.0", "v2.0.0"]


class TestParseVersion:

    def test_leading_v_is_accepted(self):
        assert parse_version("v1.4.0") == parse_version("1.4.0")

    def test_prerelease_sorts_below_release(self):
        assert parse_version("v1.0.0-rc.1") < parse_version("v1.0.0")

    def test_numeric_ordering(self):
        assert parse_version("v1.10.0") > parse_version("v1.9.0")

    @pytest.mark.parametrize("tag", ["", "latest", "v1.2", "release-1.0.0", "v1.2.3.4"])
    def test_invalid_tags_rejected(self, tag):
        with pytest.raises(InvalidVersionError) as exc:
            parse_version(tag)
        assert exc.value.tag == tag

    def test_invalid_version_is_value_error(self):
        with pytest.raises(ValueError):
            parse_version("nope")


class TestStripTagPrefix:

    def test_strips_tag_ref(self):
        assert strip_tag_prefix("refs/tags/v1.2.3") == "v1.2.3"

    def test_other_values_unchanged(self):
        assert strip_tag_prefix("v1.2.3") == "v1.2.3"
        assert strip_tag_prefix("refs/heads/main") == "refs/heads/main"


class TestClassify:

    def test_equal_is_rerelease(self):
        assert classify("v1.4.0", "v1.4.0") is Disposition.RERELEASE

    def test_sentinel_equals_itself(self):
        assert classify(SENTINEL_VERSION, SENTINEL_VERSION) is Disposition.RERELEASE

    def test_older_is_rollback(self):
        assert classify("v1.3.0", "v1.4.0") is Disposition.ROLLBACK

    def test_newer_is_release(self):
        assert classify("v1.5.0", "v1.4.0") is Disposition.RELEASE

    def test_anything_beats_sentinel(self):
        assert classify("v0.0.1", SENTINEL_VERSION) is Disposition.RELEASE

    @pytest.mark.parametrize("a,b", list(itertools.product(TAGS, TAGS)))
    def test_exactly_one_predicate_holds(self, a, b):
        flags = [is_rerelease(a, b), is_rollback(a, b), is_release(a, b)]
        assert flags.count(True) == 1
        expected = {0: Disposition.RERELEASE, 1: Disposition.ROLLBACK, 2: Disposition.RELEASE}[flags.index(True)]
        assert classify(a, b) is expected


class TestDisposition:

    def test_rerelease_reported_as_release(self):
        assert Disposition.RERELEASE.release_type == "release"

    def test_rollback_reported_as_rollback(self):
        assert Disposition.ROLLBACK.release_type == "rollback"

    def test_release_reported_as_release(self):
        assert Disposition.RELEASE.release_type == "release"
