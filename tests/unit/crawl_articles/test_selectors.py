"""Tests for crawl_articles.selectors module."""

from crawl_articles.selectors import extract_content

BASE = "https://www.starnieuws.com/index.php/welcome/index/nieuwsitem/1"


class TestExtractContent:
    def test_uses_first_matching_selector(self) -> None:
        page = """
        <html><body>
          <nav>Home | News</nav>
          <article><p>Paramaribo - The minister spoke today.</p></article>
          <div class="content"><p>Other block</p></div>
        </body></html>
        """
        content = extract_content(page, BASE)

        assert "The minister spoke today." in content
        assert "Other block" not in content
        assert "Home | News" not in content

    def test_removes_excluded_elements(self) -> None:
        page = """
        <html><body><div class="entry-content">
          <p>Body text</p>
          <div class="social-share">Share on Facebook</div>
          <script>track()</script>
        </div></body></html>
        """
        content = extract_content(page, BASE)

        assert "Body text" in content
        assert "Share on Facebook" not in content
        assert "track()" not in content

    def test_embeds_page_images_with_absolute_urls(self) -> None:
        page = """
        <html><body>
          <div class="featured-image"><img src="/images/bridge.jpg"></div>
          <article><p>Bridge opened.</p></article>
        </body></html>
        """
        content = extract_content(page, BASE)

        assert 'src="https://www.starnieuws.com/images/bridge.jpg"' in content
        assert content.count("bridge.jpg") == 1

    def test_skips_data_uri_images(self) -> None:
        page = '<html><body><article><p>Text</p></article><img src="data:image/png;base64,AAAA"></body></html>'
        assert "data:image" not in extract_content(page, BASE)

    def test_empty_page_returns_none(self) -> None:
        assert extract_content("", BASE) is None
        assert extract_content("   ", BASE) is None
