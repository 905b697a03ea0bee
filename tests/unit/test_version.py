"""Unit tests for version code parsing and comparison."""

import pytest

from bios_updater.errors import VersionFormatError
from bios_updater.models.version import (
    Ordering,
    VersionFormat,
    compare_versions,
    normalize_compact,
    parse_version,
)


@pytest.mark.unit
class TestParseVersion:
    """Test parse_version for both vendor shapes."""

    def test_dotted_version(self):
        version = parse_version("1.12.0")

        assert version.format == VersionFormat.DOTTED
        assert version.components == (1, 12, 0)
        assert version.is_valid

    def test_compact_version_normalised(self):
        """A12 strips the A and becomes 1.2."""
        version = parse_version("A12")

        assert version.format == VersionFormat.COMPACT
        assert version.components == (1, 2)

    def test_compact_equals_dotted(self):
        assert parse_version("A12") == parse_version("1.2")
        assert parse_version("A01") == parse_version("0.1")
        assert parse_version("A08") == parse_version("0.8")

    def test_normalize_compact(self):
        assert normalize_compact("A12") == "1.2"
        assert normalize_compact("A08") == "0.8"

    def test_compact_without_letter(self):
        assert parse_version("123").components == (1, 23)

    def test_single_integer(self):
        version = parse_version("12")

        assert version.format == VersionFormat.DOTTED
        assert version.components == (12,)

    def test_surrounding_whitespace_ignored(self):
        assert parse_version(" 1.2.3 \n").components == (1, 2, 3)

    @pytest.mark.parametrize("raw", ["", "abc", "1.x.0", "1..2", "A1B", "AAA", "v1.0", "12345a"])
    def test_unparseable_is_invalid(self, raw):
        """Unparseable strings do not raise, they produce an invalid code."""
        version = parse_version(raw)

        assert version.format == VersionFormat.INVALID
        assert not version.is_valid
        assert version.components == ()

    def test_invalid_logs_warning(self, caplog):
        with caplog.at_level("WARNING", logger="bios_updater.version"):
            parse_version("garbage")

        assert "Unrecognised version format" in caplog.text

    def test_str_of_compact_is_dotted(self):
        assert str(parse_version("A08")) == "0.8"

    def test_hash_consistent_with_equality(self):
        assert len({parse_version("A12"), parse_version("1.2")}) == 1


@pytest.mark.unit
class TestCompareVersions:
    """Test compare_versions ordering."""

    def test_numeric_not_lexical(self):
        """1.2.3 < 1.10.0, which string comparison gets wrong."""
        assert compare_versions(parse_version("1.2.3"), parse_version("1.10.0")) == Ordering.LESS

    def test_equal(self):
        assert compare_versions(parse_version("1.5.0"), parse_version("1.5.0")) == Ordering.EQUAL

    def test_greater(self):
        assert compare_versions(parse_version("2.0.0"), parse_version("1.5.0")) == Ordering.GREATER

    def test_compact_vs_dotted(self):
        assert compare_versions(parse_version("A08"), parse_version("1.2.0")) == Ordering.LESS

    def test_missing_trailing_component_is_less(self):
        """No zero padding: 1.2 sorts before 1.2.0."""
        assert compare_versions(parse_version("1.2"), parse_version("1.2.0")) == Ordering.LESS

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("1.0.0", "1.0.1", Ordering.LESS),
            ("1.9.9", "1.10.0", Ordering.LESS),
            ("10.0.0", "9.99.99", Ordering.GREATER),
            ("0.8", "0.10", Ordering.LESS),
        ],
    )
    def test_componentwise_order(self, a, b, expected):
        assert compare_versions(parse_version(a), parse_version(b)) == expected

    def test_invalid_raises(self):
        with pytest.raises(VersionFormatError, match="unparseable"):
            compare_versions(parse_version("garbage"), parse_version("1.0.0"))

    def test_invalid_on_right_raises(self):
        with pytest.raises(VersionFormatError):
            compare_versions(parse_version("1.0.0"), parse_version("x"))
