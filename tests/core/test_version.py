"""
Unit tests for version ordering.

Tests cover:
- Parsing of release and prerelease versions
- Prerelease tier ordering
- Invalid input handling
- Sorting helpers
"""

import pytest

from dotnetlocator.core.version import (
    MINIMUM,
    RELEASE_RANK,
    VersionKey,
    is_version,
    latest_version,
    sort_versions_descending,
)


class TestVersionKeyParse:
    """Tests for VersionKey.parse."""

    def test_release(self):
        """Test a plain release version."""
        assert VersionKey.parse("8.0.100") == (8, 0, 100, RELEASE_RANK)

    @pytest.mark.parametrize(
        "version,rank",
        [
            ("9.0.0-rc.1.24431.7", 3000),
            ("9.0.0-beta.2", 2000),
            ("9.0.0-preview.7.24405.7", 1500),
            ("9.0.0-alpha.1", 1000),
            ("9.0.0-dev", 500),
        ],
    )
    def test_prerelease_tiers(self, version, rank):
        """Test each prerelease tier gets its rank."""
        assert VersionKey.parse(version).rank == rank

    def test_prerelease_tier_is_case_insensitive(self):
        """Test tier prefixes match regardless of case."""
        assert VersionKey.parse("9.0.0-RC.1").rank == 3000
        assert VersionKey.parse("9.0.0-Preview.1").rank == 1500

    @pytest.mark.parametrize(
        "version", ["", None, "8.0", "8.0.100.1", "v8.0.100", "8.0.x", "8.0.100-", "latest"]
    )
    def test_invalid_maps_to_minimum(self, version):
        """Test invalid strings never raise and map to the minimum key."""
        assert VersionKey.parse(version) == MINIMUM

    def test_minimum_below_every_valid_key(self):
        """Test the sentinel sorts below 0.0.0 prereleases."""
        assert MINIMUM < VersionKey.parse("0.0.0-x")
        assert MINIMUM == (-1, -1, -1, -1)


class TestVersionKeyOrdering:
    """Tests for comparisons between keys."""

    def test_numeric_components_compare_as_numbers(self):
        """Test 10 sorts after 9, not lexically."""
        assert VersionKey.parse("10.0.100") > VersionKey.parse("9.0.100")
        assert VersionKey.parse("8.0.1000") > VersionKey.parse("8.0.200")

    def test_release_outranks_prereleases(self):
        """Test a release beats every prerelease of the same version."""
        release = VersionKey.parse("8.0.100")
        for suffix in ("rc.2", "beta.1", "preview.7", "alpha.1", "ci"):
            assert release > VersionKey.parse(f"8.0.100-{suffix}")

    def test_tier_order(self):
        """Test rc > beta > preview > alpha > other."""
        keys = [
            VersionKey.parse(v)
            for v in (
                "9.0.0-rc.1",
                "9.0.0-beta.1",
                "9.0.0-preview.1",
                "9.0.0-alpha.1",
                "9.0.0-nightly",
            )
        ]
        assert keys == sorted(keys, reverse=True)
        assert len(set(keys)) == 5

    def test_same_tier_prereleases_compare_equal(self):
        """Test numeric suffixes within a tier do not affect ordering."""
        assert VersionKey.parse("8.0.100-rc.1") == VersionKey.parse("8.0.100-rc.2")

    def test_prerelease_of_newer_version_beats_older_release(self):
        """Test major/minor/patch dominate the rank."""
        assert VersionKey.parse("9.0.0-preview.1") > VersionKey.parse("8.0.100")


class TestHelpers:
    """Tests for module-level helpers."""

    def test_is_version(self):
        """Test grammar check."""
        assert is_version("8.0.100")
        assert is_version("9.0.0-preview.7.24405.7")
        assert not is_version("Microsoft.NETCore.App")
        assert not is_version("8.0")

    def test_sort_versions_descending(self):
        """Test newest first ordering."""
        result = sort_versions_descending(["7.0.400", "8.0.100-rc.2", "8.0.100", "garbage"])
        assert result == ["8.0.100", "8.0.100-rc.2", "7.0.400", "garbage"]

    def test_sort_is_stable_for_equal_keys(self):
        """Test ties keep their input order."""
        result = sort_versions_descending(["8.0.100-rc.1", "8.0.100-rc.2"])
        assert result == ["8.0.100-rc.1", "8.0.100-rc.2"]

    def test_sort_with_key(self):
        """Test sorting objects by an extracted version."""
        items = [{"v": "1.0.0"}, {"v": "3.0.0"}, {"v": "2.0.0"}]
        result = sort_versions_descending(items, key=lambda item: item["v"])
        assert [item["v"] for item in result] == ["3.0.0", "2.0.0", "1.0.0"]

    def test_latest_version(self):
        """Test greatest valid name wins and invalid names are ignored."""
        assert latest_version(["7.0.10", "8.0.0", "backup", "8.0.0-rc.1"]) == "8.0.0"

    def test_latest_version_none_valid(self):
        """Test no valid names gives None."""
        assert latest_version(["backup", ""]) is None
        assert latest_version([]) is None
