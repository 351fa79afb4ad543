import pytest

from adb_api.catalog import DEFAULT_CATALOG
from adb_api.resolver import (
    CONTAINMENT,
    TOKEN_OVERLAP,
    CommandResolver,
    find_best_match,
    normalize,
    token_coverage,
)

from conftest import make_catalog


resolver = CommandResolver()


def phrase_of(text, r=resolver):
    hit = r.match(text)
    return hit[0] if hit else None


class TestNormalization:
    def test_normalize(self):
        assert normalize("  Go HOME \t") == "go home"
        assert normalize("") == ""
        assert normalize(None) == ""

    @pytest.mark.parametrize("text", ["go home", "please go home now", "up volume", "back", "xyz123"])
    def test_case_and_whitespace_invariance(self, text):
        expected = resolver.resolve(text)
        assert resolver.resolve(text.upper()) == expected
        assert resolver.resolve("  " + text + "  ") == expected

    def test_deterministic(self):
        for text in ["turn the volume up a bit", "frobnicate the quux", "BACK"]:
            assert resolver.resolve(text) == resolver.resolve(text)


class TestContainmentPass:
    def test_every_phrase_matches_itself(self):
        for phrase, descriptor in DEFAULT_CATALOG.items():
            assert resolver.resolve(phrase) == descriptor

    def test_exact_phrase_any_case(self):
        assert resolver.resolve("Go Home") is DEFAULT_CATALOG.get("go home")

    def test_input_contains_phrase(self):
        assert phrase_of("please go home now") == "go home"
        assert resolver.match("please go home now")[1] == CONTAINMENT

    def test_phrase_contains_input(self):
        assert phrase_of("BACK") == "go back"
        assert phrase_of("screensh") == "take screenshot"

    def test_contiguous_phrase_inside_sentence(self):
        assert phrase_of("turn the volume up a bit") == "volume up"


class TestTokenOverlapPass:
    def test_reordered_words(self):
        assert phrase_of("up volume") == "volume up"
        assert resolver.match("up volume")[1] == TOKEN_OVERLAP

    def test_words_split_by_other_words(self):
        result = resolver.resolve("can you take a screenshot please")
        assert result is DEFAULT_CATALOG.get("take screenshot")

    def test_single_word_is_enough_for_two_word_phrase(self):
        assert phrase_of("screenshot please") == "take screenshot"

    def test_one_letter_tokens_only_cover_equal_words(self):
        assert token_coverage("go back", ["a"]) == 0.0
        assert token_coverage("go back", ["back"]) == 0.5
        assert token_coverage("x ray", ["x"]) == 0.5

    def test_article_does_not_match_word_containing_it(self):
        r = CommandResolver(catalog=make_catalog("go back"))
        assert r.resolve("can you take a screenshot please") is None

    def test_threshold_boundary_three_words(self):
        r = CommandResolver(catalog=make_catalog("alpha bravo charlie"))
        assert r.resolve("alpha zulu") is None
        assert phrase_of("charlie alpha", r) == "alpha bravo charlie"
        assert r.match("charlie alpha")[1] == TOKEN_OVERLAP

    def test_token_coverage_ratio(self):
        assert token_coverage("alpha bravo charlie", ["alpha"]) == pytest.approx(1 / 3)
        assert token_coverage("alpha bravo charlie", ["alphas", "brav"]) == pytest.approx(2 / 3)

    def test_custom_threshold(self):
        r = CommandResolver(catalog=make_catalog("alpha bravo charlie"), threshold=1.0)
        assert r.resolve("charlie alpha") is None
        assert r.resolve("charlie bravo alpha") is not None


class TestNoMatch:
    @pytest.mark.parametrize("text", ["frobnicate the quux", "xyz123", "", "   \t\n"])
    def test_returns_none(self, text):
        assert resolver.resolve(text) is None
        assert find_best_match(text) is None


class TestPriority:
    def test_first_inserted_wins(self):
        r = CommandResolver(catalog=make_catalog("go home", "go home now"))
        assert phrase_of("go home now please", r) == "go home"

        r = CommandResolver(catalog=make_catalog("go home now", "go home"))
        assert phrase_of("go home now please", r) == "go home now"

    def test_containment_beats_earlier_token_overlap(self):
        r = CommandResolver(catalog=make_catalog("screen lock", "lock screen"))
        assert phrase_of("lock screen", r) == "lock screen"

    def test_find_best_match_with_catalog(self):
        catalog = make_catalog("open camera")
        assert find_best_match("please open camera", catalog) is catalog.get("open camera")


class TestExplain:
    def test_found(self):
        result = resolver.explain("please go home now")
        assert result.found is True
        assert result.phrase == "go home"
        assert result.strategy == CONTAINMENT
        assert result.command.command == "input keyevent 3"
        assert result.command.name == "Go to Home Screen"

    def test_not_found_lists_phrases(self):
        result = resolver.explain("frobnicate the quux")
        assert result.found is False
        assert result.reason == "no match"
        assert result.available == DEFAULT_CATALOG.phrases()
