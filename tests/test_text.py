"""Tests for text normalisation: tokenisers, title cleaning, domains."""

from daytrace.text import (
    ENTITY_STOPWORDS,
    STOPWORDS_LOWER,
    clean_title,
    parse_domain,
    query_content_words,
    tokenize,
    visit_domain,
)


class TestStopwords:
    def test_lowercase_table_covers_every_entry(self):
        assert len(STOPWORDS_LOWER) == len({w.lower() for w in ENTITY_STOPWORDS})
        assert all(w == w.lower() for w in STOPWORDS_LOWER)

    def test_tables_are_immutable(self):
        assert isinstance(ENTITY_STOPWORDS, frozenset)
        assert isinstance(STOPWORDS_LOWER, frozenset)


class TestTokenize:
    def test_lowercases_and_strips_punctuation(self):
        assert tokenize("React Hooks: a guide!") == ["react", "hooks", "guide"]

    def test_removes_stopwords_case_insensitively(self):
        assert tokenize("The API Dashboard with Kafka") == ["kafka"]

    def test_drops_short_tokens(self):
        assert tokenize("go to js db") == []

    def test_punctuation_splits_words(self):
        assert tokenize("node.js/express-router") == ["node", "express", "router"]

    def test_empty_string(self):
        assert tokenize("") == []

    def test_keeps_order_and_duplicates(self):
        assert tokenize("rust tokio rust") == ["rust", "tokio", "rust"]


class TestQueryContentWords:
    def test_filters_query_stopwords(self):
        assert query_content_words("how to use the array map in javascript") == {
            "how", "use", "array", "map", "javascript",
        }

    def test_returns_set(self):
        assert query_content_words("array array") == {"array"}


class TestCleanTitle:
    def test_strips_brand_suffix(self):
        assert clean_title("How to deep copy array — Stack Overflow") == "How to deep copy array"

    def test_picks_longest_segment(self):
        assert clean_title("python - How do I merge two dictionaries") == (
            "How do I merge two dictionaries"
        )

    def test_nav_noise_becomes_empty(self):
        assert clean_title("Home") == ""
        assert clean_title("Dashboard | Acme") == ""

    def test_short_title_becomes_empty(self):
        assert clean_title("Hi") == ""

    def test_empty_title(self):
        assert clean_title("") == ""

    def test_plain_title_unchanged(self):
        assert clean_title("Understanding asyncio event loops") == (
            "Understanding asyncio event loops"
        )


class TestDomains:
    def test_strips_www(self):
        assert parse_domain("https://www.example.com/page") == "example.com"

    def test_keeps_subdomain(self):
        assert parse_domain("https://docs.python.org/3/library/asyncio.html") == "docs.python.org"

    def test_unparsable_returns_none(self):
        assert parse_domain("not a url") is None
        assert parse_domain("http://[::1") is None

    def test_visit_domain_falls_back_to_empty(self):
        assert visit_domain("not a url") == ""
        assert visit_domain("https://github.com/x") == "github.com"
