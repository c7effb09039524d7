"""Tests for ingest_articles.clean_articles.clean module."""

from ingest_articles.clean_articles.clean import clean_text


class TestCleanText:
    def test_strips_html_tags(self) -> None:
        assert clean_text("<h1>Title</h1> <p>Body</p>") == "Title Body"

    def test_decodes_entities(self) -> None:
        assert clean_text("Paramaribo &amp; Nickerie") == "Paramaribo & Nickerie"

    def test_removes_escaped_quotes(self) -> None:
        assert clean_text('He said \\"hello\\"') == 'He said "hello"'

    def test_collapses_whitespace(self) -> None:
        assert clean_text("multiple   spaces \n here") == "multiple spaces here"

    def test_none_returns_empty(self) -> None:
        assert clean_text(None) == ""

    def test_whitespace_only_returns_empty(self) -> None:
        assert clean_text("   \n\t ") == ""
