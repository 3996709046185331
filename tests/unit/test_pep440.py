"""Tests for PEP 440 conversion."""

from __future__ import annotations

import logging

import pytest

from release_version.core.pep440 import from_pep440, to_pep440
from release_version.core.version import Version


class TestFromPep440:
    """Tests for from_pep440()."""

    @pytest.mark.parametrize(
        ("text", "base", "prerelease", "buildmetadata"),
        [
            ("1.2.3", (1, 2, 3), None, None),
            ("v1.2.3", (1, 2, 3), None, None),
            ("1.2.3a1", (1, 2, 3), "alpha.1", None),
            ("1.2.3a.1", (1, 2, 3), "alpha.1", None),
            ("1.2.3b2", (1, 2, 3), "beta.2", None),
            ("1.2.3rc1", (1, 2, 3), "rc.1", None),
            ("1.2.3c1", (1, 2, 3), "rc.1", None),
            ("1.2.3-preview1", (1, 2, 3), "pre.1", None),
            ("1.2.3.post2", (1, 2, 3), "post.2", None),
            ("1.2.3-4", (1, 2, 3), "post.4", None),
            ("1.2.3+local.1", (1, 2, 3), None, "local.1"),
            ("v0.1.0.dev3+meta", (0, 1, 0), "dev.3", "meta"),
        ],
    )
    def test_conversion(self, text, base, prerelease, buildmetadata):
        """Known PEP 440 forms convert to the expected SemVer parts."""
        v = from_pep440(text)
        assert v is not None
        assert v.base == base
        assert v.prerelease == prerelease
        assert v.buildmetadata == buildmetadata

    def test_missing_segments_default_to_zero(self):
        assert from_pep440("2") == Version(2, 0, 0)
        assert from_pep440("2.1") == Version(2, 1, 0)

    def test_label_without_number(self):
        assert from_pep440("1.0.0rc").prerelease == "rc"

    def test_uppercase_labels(self):
        assert from_pep440("1.0.0RC2").prerelease == "rc.2"

    def test_pre_wins_over_post_and_dev(self):
        """Only the highest precedence segment survives."""
        assert from_pep440("1.0.0rc1.post2.dev3").prerelease == "rc.1"
        assert from_pep440("1.0.0.post2.dev3").prerelease == "post.2"

    def test_epoch_ignored(self, caplog: pytest.LogCaptureFixture):
        """The epoch is parsed and dropped."""
        with caplog.at_level(logging.INFO):
            v = from_pep440("1!2.3.4rc1+local")
        assert v == Version(2, 3, 4, "rc.1", "local")
        assert "epoch" in caplog.text

    @pytest.mark.parametrize("text", ["not-a-version", "1.2.x", "1.2.3.4", "", "1.2.3gamma1"])
    def test_invalid_returns_none(self, text: str):
        assert from_pep440(text) is None

    def test_local_not_expressible_returns_none(self):
        """A local segment that is not valid build metadata fails conversion."""
        assert from_pep440("1.2.3+local_1") is None


class TestToPep440:
    """Tests for to_pep440()."""

    @pytest.mark.parametrize(
        ("version", "expected"),
        [
            (Version(1, 2, 3), "1.2.3"),
            (Version(1, 2, 3, "alpha.1"), "1.2.3a1"),
            (Version(1, 2, 3, "beta2"), "1.2.3b2"),
            (Version(1, 2, 3, "rc0"), "1.2.3rc0"),
            (Version(1, 2, 3, "rc.1"), "1.2.3rc1"),
            (Version(0, 1, 0, "dev.3"), "0.1.0.dev3"),
            (Version(1, 0, 0, "post.2"), "1.0.0.post2"),
            (Version(1, 0, 0, "snapshot"), "1.0.0snapshot"),
        ],
    )
    def test_rendering(self, version: Version, expected: str):
        assert to_pep440(version) == expected

    def test_numeric_prerelease_is_dev_release(self, caplog: pytest.LogCaptureFixture):
        """A bare numeric prerelease is not glued onto the patch number."""
        with caplog.at_level(logging.INFO):
            assert to_pep440(Version(1, 2, 3, "1")) == "1.2.3.dev1"
        assert "dev release" in caplog.text

    def test_build_metadata_dropped(self, caplog: pytest.LogCaptureFixture):
        """Build metadata is dropped with an informational message."""
        with caplog.at_level(logging.INFO):
            assert to_pep440(Version(1, 2, 3, None, "build.1")) == "1.2.3"
        assert "build metadata" in caplog.text

    def test_round_trip_through_pep440(self):
        """Converting to PEP 440 and back keeps the version."""
        v = Version(1, 2, 3, "rc.4")
        assert from_pep440(to_pep440(v)) == v
