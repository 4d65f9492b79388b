"""
Tests for Graphemes — Splitting token text into hat anchors

These tests validate:
- First character plus word-boundary anchors
- Case folding, accent stripping and the preserve sets
- Excluded characters never anchor
- Round-trip reconstruction of token text
- Splitting mode validation
"""

import pytest

from hatter.core.graphemes import (
    Grapheme,
    TokenGraphemeSplitter,
    TokenHatSplittingMode,
    is_word_boundary,
    reconstruct_token_text,
)


def texts(graphemes):
    return [g.text for g in graphemes]


class TestAnchors:
    """Which positions become graphemes."""

    def test_camel_case_boundaries(self):
        """myVariableName anchors at m, V, N."""
        graphemes = TokenGraphemeSplitter().get_token_graphemes("myVariableName")
        assert texts(graphemes) == ["m", "v", "n"]
        assert [g.offset for g in graphemes] == [0, 2, 10]
        assert [g.raw for g in graphemes] == ["m", "V", "N"]

    def test_snake_case_boundaries(self):
        """Characters after underscores anchor."""
        graphemes = TokenGraphemeSplitter().get_token_graphemes("user_profile")
        assert texts(graphemes) == ["u", "p"]
        assert [g.offset for g in graphemes] == [0, 5]

    def test_acronym_boundary(self):
        """The last capital of an acronym run starts the next word."""
        graphemes = TokenGraphemeSplitter().get_token_graphemes("HTMLParser")
        assert texts(graphemes) == ["h", "p"]
        assert graphemes[1].offset == 4

    def test_digit_letter_transitions(self):
        """Digit/letter changes are boundaries in both directions."""
        assert texts(TokenGraphemeSplitter().get_token_graphemes("utf8Decode")) == ["u", "8", "d"]

    def test_symbol_token_uses_first_character(self):
        """Operators anchor on their first character only."""
        assert texts(TokenGraphemeSplitter().get_token_graphemes("===")) == ["="]
        assert texts(TokenGraphemeSplitter().get_token_graphemes(")")) == [")"]

    def test_leading_underscores(self):
        """A leading separator anchors, and so does the word after it."""
        assert texts(TokenGraphemeSplitter().get_token_graphemes("__init__")) == ["_", "i"]

    def test_duplicate_identity_kept_once(self):
        """The same normalized text anchors only at its earliest position."""
        graphemes = TokenGraphemeSplitter().get_token_graphemes("aA_a")
        assert texts(graphemes) == ["a"]
        assert graphemes[0].offset == 0

    def test_empty_text(self):
        """Empty text has no graphemes."""
        assert TokenGraphemeSplitter().get_token_graphemes("") == []

    def test_graphemes_are_ordered_and_disjoint(self):
        """Graphemes come left to right and never overlap."""
        graphemes = TokenGraphemeSplitter().get_token_graphemes("get_HTTPResponse2xx_value")
        for left, right in zip(graphemes, graphemes[1:]):
            assert left.end <= right.offset


class TestNormalization:
    """How characters map to grapheme identities."""

    def test_case_folded_by_default(self):
        """'Fox' and 'fox' share an identity by default."""
        splitter = TokenGraphemeSplitter()
        assert texts(splitter.get_token_graphemes("Fox")) == texts(splitter.get_token_graphemes("fox"))

    def test_preserve_case(self):
        """With preserve_case, upper and lower case stay distinct."""
        splitter = TokenGraphemeSplitter(TokenHatSplittingMode(preserve_case=True))
        assert texts(splitter.get_token_graphemes("Fox")) == ["F"]
        assert texts(splitter.get_token_graphemes("fox")) == ["f"]

    def test_accents_stripped(self):
        """Accented letters normalize to their base letter."""
        assert texts(TokenGraphemeSplitter().get_token_graphemes("éclair")) == ["e"]

    def test_letters_to_preserve(self):
        """Preserved letters keep accents and case."""
        mode = TokenHatSplittingMode(letters_to_preserve="éÉ")
        splitter = TokenGraphemeSplitter(mode)
        assert texts(splitter.get_token_graphemes("éclair")) == ["é"]
        assert texts(splitter.get_token_graphemes("École")) == ["É"]

    def test_preserved_letter_survives_case_folding(self):
        """An upper-case form folds onto a preserved lower-case letter."""
        splitter = TokenGraphemeSplitter(TokenHatSplittingMode(letters_to_preserve="ñ"))
        assert splitter.normalize_grapheme("Ñ") == "ñ"
        assert texts(splitter.get_token_graphemes("Ñu")) == ["ñ"]
        assert texts(splitter.get_token_graphemes("nu")) == ["n"]

    def test_unlisted_case_still_strips_accents(self):
        """With preserve_case, 'Ñ' is not the preserved 'ñ' and loses its tilde."""
        mode = TokenHatSplittingMode(preserve_case=True, letters_to_preserve="ñ")
        splitter = TokenGraphemeSplitter(mode)
        assert splitter.normalize_grapheme("Ñ") == "N"
        assert splitter.normalize_grapheme("ñ") == "ñ"

    def test_excluded_first_character_skipped(self):
        """An unaddressable first character hands the lead to the next one."""
        graphemes = TokenGraphemeSplitter().get_token_graphemes("😀x")
        assert texts(graphemes) == ["x"]
        assert graphemes[0].offset == 1

    def test_symbols_to_preserve(self):
        """Listed symbols become addressable as-is."""
        splitter = TokenGraphemeSplitter(TokenHatSplittingMode(symbols_to_preserve="😀"))
        assert texts(splitter.get_token_graphemes("😀x")) == ["😀", "x"]

    def test_whitespace_excluded(self):
        """Whitespace never anchors."""
        assert TokenGraphemeSplitter().normalize_grapheme(" ") is None
        assert TokenGraphemeSplitter().normalize_grapheme("\t") is None

    def test_ascii_punctuation_kept(self):
        """ASCII punctuation is addressable."""
        assert TokenGraphemeSplitter().normalize_grapheme("#") == "#"


class TestRoundTrip:
    """Graphemes plus gaps rebuild the token."""

    @pytest.mark.parametrize("text", [
        "myVariableName", "user_profile", "HTMLParser", "__init__",
        "😀x", "éclair", "a", "===", "",
    ])
    def test_reconstruct(self, text):
        """No characters are lost or duplicated."""
        graphemes = TokenGraphemeSplitter().get_token_graphemes(text)
        assert reconstruct_token_text(text, graphemes) == text
        for g in graphemes:
            assert text[g.offset:g.end] == g.raw


class TestWordBoundary:
    """is_word_boundary on its own."""

    def test_start_is_boundary(self):
        assert is_word_boundary("abc", 0)

    def test_inside_word_is_not(self):
        assert not is_word_boundary("abc", 1)

    def test_separator_itself_is_not(self):
        assert not is_word_boundary("a_b", 1)
        assert is_word_boundary("a_b", 2)


class TestSplittingModeValidation:
    """Mode validation at configuration load."""

    def test_default_is_valid(self):
        assert TokenHatSplittingMode().validate() is None

    def test_strings_become_sets(self):
        """Plain strings are read as sets of characters."""
        mode = TokenHatSplittingMode(letters_to_preserve="éü")
        assert mode.letters_to_preserve == frozenset({"é", "ü"})

    def test_conflicting_sets(self):
        """A character cannot be both a preserved letter and a preserved symbol."""
        mode = TokenHatSplittingMode(letters_to_preserve="é", symbols_to_preserve="é")
        error = mode.validate()
        assert error is not None
        assert "both" in error

    def test_symbol_in_letters(self):
        """letters_to_preserve only takes letters."""
        error = TokenHatSplittingMode(letters_to_preserve="$").validate()
        assert error is not None
        assert "non-letters" in error

    def test_letter_in_symbols(self):
        """symbols_to_preserve rejects letters and digits."""
        error = TokenHatSplittingMode(symbols_to_preserve="a").validate()
        assert error is not None

    def test_multi_character_entry(self):
        """Entries must be single characters."""
        error = TokenHatSplittingMode(letters_to_preserve=frozenset({"ab"})).validate()
        assert error is not None
        assert "single characters" in error

    def test_grapheme_end(self):
        """Grapheme.end is offset plus raw length."""
        assert Grapheme(text="v", raw="V", offset=2).end == 3
