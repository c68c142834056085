"""Tests for author list formatting."""

import pytest

from citekit.engine import UNKNOWN_AUTHOR, AuthorFormatter
from citekit.styles import AuthorRules, NameFormat


@pytest.fixture
def formatter():
    return AuthorFormatter()


@pytest.fixture
def rules():
    """Nature-like rules: ampersand before the last author, et al. after 3."""
    return AuthorRules(max_authors=3, et_al_after=3, delimiter=", ", final_delimiter=" & ")


class TestFormat:
    """Tests for AuthorFormatter.format."""

    def test_single_author(self, formatter, rules):
        assert formatter.format("Smith J", rules) == "Smith, J"

    def test_two_authors_use_final_delimiter(self, formatter, rules):
        assert formatter.format("Smith J, Doe A", rules) == "Smith, J & Doe, A"

    def test_three_authors(self, formatter, rules):
        assert formatter.format("Smith J, Doe A, Lee K", rules) == "Smith, J, Doe, A & Lee, K"

    def test_ampersand_separates_authors(self, formatter, rules):
        assert formatter.format("Smith J & Doe A", rules) == "Smith, J & Doe, A"

    def test_truncates_with_et_al(self, formatter, rules):
        """Test that authors past the threshold are replaced by et al."""
        result = formatter.format("Smith J, Doe A, Lee K, Park S", rules)
        assert result == "Smith, J, Doe, A & Lee, K et al."

    def test_list_input(self, formatter, rules):
        assert formatter.format(["Smith J", "Doe A"], rules) == "Smith, J & Doe, A"

    def test_list_blank_entries_dropped(self, formatter, rules):
        assert formatter.format(["Smith J", "  ", "", "Doe A"], rules) == "Smith, J & Doe, A"

    @pytest.mark.parametrize("authors", ["", None, [], " , & "])
    def test_missing_authors(self, formatter, rules, authors):
        assert formatter.format(authors, rules) == UNKNOWN_AUTHOR

    def test_full_name_format_keeps_names(self, formatter):
        rules = AuthorRules(format=NameFormat.LAST_NAME_FIRST_NAME, final_delimiter=" and ")
        assert formatter.format("Smith John, Doe Anna", rules) == "Smith John and Doe Anna"


class TestEtAlThreshold:
    """The et al. suffix appears exactly when 0 < etAlAfter < author count."""

    AUTHORS = ["One A", "Two B", "Three C", "Four D", "Five E", "Six F"]

    @pytest.mark.parametrize("k", [1, 2, 3, 4, 5])
    def test_truncates_to_k_names(self, formatter, k):
        rules = AuthorRules(et_al_after=k, delimiter="; ", final_delimiter="; ")
        result = formatter.format(self.AUTHORS, rules)

        assert result.endswith(" et al.")
        names = result[: -len(" et al.")].split("; ")
        assert len(names) == k

    @pytest.mark.parametrize("k", [0, 6, 7, 20])
    def test_no_et_al(self, formatter, k):
        rules = AuthorRules(et_al_after=k, delimiter="; ", final_delimiter="; ")
        result = formatter.format(self.AUTHORS, rules)

        assert "et al." not in result
        assert len(result.split("; ")) == len(self.AUTHORS)


class TestNameParts:
    """Tests for surname and initials extraction."""

    def test_last_name_before_comma(self, formatter):
        assert formatter.extract_last_name("Smith, John") == "Smith"

    def test_last_name_first_word(self, formatter):
        assert formatter.extract_last_name("Smith J A") == "Smith"

    @pytest.mark.parametrize("author", ["", "   "])
    def test_last_name_empty(self, formatter, author):
        assert formatter.extract_last_name(author) == ""

    def test_initials_after_comma(self, formatter):
        assert formatter.extract_initials("Smith, J. A.") == "J. A."

    def test_initials_after_first_word(self, formatter):
        assert formatter.extract_initials("Smith J A") == "J A"

    def test_single_word_name(self, formatter):
        assert formatter.extract_initials("Consortium") == ""
        assert formatter.format_name("Consortium", NameFormat.LAST_NAME_FIRST_INITIAL) == "Consortium"
