"""
Unit tests for folder naming.
"""

import pytest

from refolder.errors import InvalidConfig
from refolder.naming import (
    folder_name,
    index_to_letters,
    letters_to_index,
    parse_folder_index,
    validate_naming,
    validate_prefix,
)
from refolder.types import SuffixStyle


class TestIndexToLetters:
    """Tests for bijective base-26 letter suffixes."""

    def test_single_letters(self):
        """First 26 indexes map to a..z."""
        assert index_to_letters(0) == "a"
        assert index_to_letters(1) == "b"
        assert index_to_letters(25) == "z"

    def test_two_letters(self):
        """Index 26 rolls over to aa, not ba."""
        assert index_to_letters(26) == "aa"
        assert index_to_letters(27) == "ab"
        assert index_to_letters(51) == "az"
        assert index_to_letters(52) == "ba"
        assert index_to_letters(701) == "zz"

    def test_three_letters(self):
        assert index_to_letters(702) == "aaa"

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            index_to_letters(-1)

    def test_letters_to_index_inverts(self):
        """Parsing a generated suffix returns the original index."""
        for index in (0, 25, 26, 701, 702):
            assert letters_to_index(index_to_letters(index)) == index


class TestFolderName:
    """Tests for folder_name function."""

    def test_numbers_are_one_based(self):
        assert folder_name(0, "group", SuffixStyle.NUMBERS) == "group-1"
        assert folder_name(9, "group", SuffixStyle.NUMBERS) == "group-10"

    def test_letters(self):
        assert folder_name(0, "prefix", SuffixStyle.LETTERS) == "prefix-a"
        assert folder_name(25, "prefix", SuffixStyle.LETTERS) == "prefix-z"
        assert folder_name(26, "prefix", SuffixStyle.LETTERS) == "prefix-aa"

    def test_none_uses_bare_prefix(self):
        assert folder_name(0, "batch", SuffixStyle.NONE) == "batch"

    def test_none_second_folder_rejected(self):
        """A second folder cannot be named with the 'none' scheme."""
        with pytest.raises(InvalidConfig):
            folder_name(1, "batch", SuffixStyle.NONE)


class TestValidation:
    """Tests for prefix and naming validation."""

    @pytest.mark.parametrize("prefix", ["", "   ", "a/b", ".", ".."])
    def test_bad_prefix(self, prefix):
        with pytest.raises(InvalidConfig):
            validate_prefix(prefix)

    def test_good_prefix(self):
        validate_prefix("example")
        validate_prefix("my group")

    def test_none_with_many_folders_collides(self):
        with pytest.raises(InvalidConfig) as exc_info:
            validate_naming("group", SuffixStyle.NONE, 2)
        assert "none" in str(exc_info.value)

    def test_none_with_one_folder_allowed(self):
        validate_naming("group", SuffixStyle.NONE, 1)

    def test_zero_folders_rejected(self):
        with pytest.raises(InvalidConfig):
            validate_naming("group", SuffixStyle.NUMBERS, 0)

    def test_suffix_style_parsing(self):
        assert SuffixStyle.from_string("Letters") == SuffixStyle.LETTERS
        assert SuffixStyle.from_string("none") == SuffixStyle.NONE
        with pytest.raises(InvalidConfig):
            SuffixStyle.from_string("roman")


class TestParseFolderIndex:
    """Tests for recognizing output folders of a previous run."""

    def test_numbers(self):
        assert parse_folder_index("group-1", "group", SuffixStyle.NUMBERS) == 0
        assert parse_folder_index("group-12", "group", SuffixStyle.NUMBERS) == 11

    def test_numbers_rejects_non_generated_names(self):
        """Names the scheme would never produce are not output folders."""
        for name in ("group-0", "group-01", "group-a", "group-", "group", "groupx-1", "other-1"):
            assert parse_folder_index(name, "group", SuffixStyle.NUMBERS) is None

    def test_letters(self):
        assert parse_folder_index("group-a", "group", SuffixStyle.LETTERS) == 0
        assert parse_folder_index("group-aa", "group", SuffixStyle.LETTERS) == 26

    def test_letters_rejects_other_schemes(self):
        for name in ("group-1", "group-A", "group-a1", "group"):
            assert parse_folder_index(name, "group", SuffixStyle.LETTERS) is None

    def test_trailing_newline_rejected(self):
        assert parse_folder_index("group-1\n", "group", SuffixStyle.NUMBERS) is None
        assert parse_folder_index("group-a\n", "group", SuffixStyle.LETTERS) is None

    def test_none(self):
        assert parse_folder_index("group", "group", SuffixStyle.NONE) == 0
        assert parse_folder_index("group-1", "group", SuffixStyle.NONE) is None

    def test_prefix_containing_separator(self):
        """Prefixes may themselves contain dashes."""
        assert parse_folder_index("my-set-3", "my-set", SuffixStyle.NUMBERS) == 2
        assert parse_folder_index("my-set-3", "my", SuffixStyle.NUMBERS) is None
