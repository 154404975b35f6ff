"""Tests for Markdown conversion, frontmatter, file names and assembly."""

from datetime import datetime

from webclipper.conversion import (
    DocumentAssembler,
    FrontmatterBuilder,
    HtmlToMarkdown,
    generate_file_name,
)
from webclipper.models.document import ExtractedDocument, RawDocument, Reply
from webclipper.replies import ReplyFormatter


class TestHtmlToMarkdown:
    """Tests for HtmlToMarkdown."""

    def test_headings_and_emphasis(self):
        markdown = HtmlToMarkdown().convert(
            "<h1>Title</h1><p>Some <strong>bold</strong> text</p>", "https://example.com/"
        )
        assert "# Title" in markdown
        assert "**bold**" in markdown

    def test_links_are_absolute(self):
        """Test that relative links resolve against the source URL."""
        markdown = HtmlToMarkdown().convert('<p><a href="/docs">Docs</a></p>', "https://example.com/a/b")
        assert "[Docs]" in markdown
        assert "https://example.com/docs" in markdown

    def test_relative_image_sources_resolved(self):
        markdown = HtmlToMarkdown().convert('<img src="img/a.png" alt="a">', "https://example.com/post/1")
        assert "![a](https://example.com/post/img/a.png)" in markdown

    def test_br_runs_collapse(self):
        """Test that stacked <br> tags leave at most one blank line."""
        markdown = HtmlToMarkdown().convert("<p>a<br><br><br><br><br>b</p>", "https://example.com/")
        assert "\n\n\n" not in markdown
        assert markdown.startswith("a\n")

    def test_no_line_wrapping(self):
        long_text = " ".join(["word"] * 100)
        markdown = HtmlToMarkdown().convert(f"<p>{long_text}</p>", "https://example.com/")
        assert long_text in markdown

    def test_blank_lines_collapsed(self):
        markdown = HtmlToMarkdown().convert("<p>a</p><br><br><br><br><p>b</p>", "https://example.com/")
        assert "\n\n\n" not in markdown
        assert markdown.endswith("\n")

    def test_images_kept(self):
        markdown = HtmlToMarkdown().convert('<img src="https://img.example/x.png">', "https://example.com/")
        assert "https://img.example/x.png" in markdown


class TestFrontmatterBuilder:
    """Tests for FrontmatterBuilder."""

    def test_build(self):
        frontmatter = FrontmatterBuilder().build(
            url="https://example.com/post",
            time=datetime(2024, 5, 6, 7, 8, 9),
        )
        assert frontmatter == "---\nsource: https://example.com/post\ntime: 2024-05-06T07:08:09\n---\n\n"

    def test_title_and_extra_fields(self):
        frontmatter = FrontmatterBuilder().build(
            url="https://example.com/",
            title='Say "hi"',
            tags=["clip", "web"],
            pages=3,
            skipped=None,
        )
        assert 'title: "Say \\"hi\\""' in frontmatter
        assert "tags:\n  - clip\n  - web" in frontmatter
        assert "pages: 3" in frontmatter
        assert "skipped" not in frontmatter


class TestGenerateFileName:
    """Tests for generate_file_name()."""

    def test_illegal_characters_removed(self):
        assert generate_file_name('a<b>c:d"e/f\\g|h?i*j') == "abcdefghij"

    def test_whitespace_collapsed(self):
        assert generate_file_name("  Hello \n\t world  ") == "Hello world"

    def test_truncated(self):
        name = generate_file_name("x" * 150)
        assert len(name) == 100

    def test_fallback(self):
        """Test the timestamped name for titles with nothing usable."""
        now = datetime(2024, 1, 2, 3, 4, 5)
        assert generate_file_name("???", now=now) == "web-clip-20240102-030405"
        assert generate_file_name("", now=now) == "web-clip-20240102-030405"

    def test_unicode_kept(self):
        assert generate_file_name("如何学习 Python？") == "如何学习 Python？"


class TestDocumentAssembler:
    """Tests for DocumentAssembler."""

    def test_assemble(self):
        extracted = ExtractedDocument(title="Post", body_html="<p>Body text</p>")
        raw = RawDocument(html="<html><body><p>Body text</p></body></html>", source_url="https://example.com/")

        result = DocumentAssembler().assemble(extracted, raw)

        assert result.title == "Post"
        assert "Body text" in result.markdown
        assert result.raw_html == raw.html
        assert result.content == result.markdown
        assert result.html == raw.html

    def test_replies_appended_after_body(self):
        extracted = ExtractedDocument(title="Thread", body_html="<p>Opening post</p>")
        raw = RawDocument(html="<html></html>", source_url="https://v2ex.com/t/1")

        result = DocumentAssembler().assemble(extracted, raw, "<h2>Replies (1)</h2><div>First reply</div>")

        assert result.markdown.index("Opening post") < result.markdown.index("Replies")
        assert "First reply" in result.markdown

    def test_relative_links_in_replies_resolved(self):
        """Test that reply links are made absolute against the page URL."""
        extracted = ExtractedDocument(title="Thread", body_html="<p>Opening post</p>")
        raw = RawDocument(html="<html></html>", source_url="https://www.v2ex.com/t/123")
        replies_html = ReplyFormatter().format(
            [Reply(author="alice", body_html='<a href="/member/bob">@bob</a> agreed, see <a href="/t/9">this</a>')]
        )

        markdown = DocumentAssembler().assemble(extracted, raw, replies_html).markdown

        assert "[@bob](https://www.v2ex.com/member/bob) agreed" in markdown
        assert "[this](https://www.v2ex.com/t/9)" in markdown
        assert "<" not in markdown

    def test_reply_headings_read_cleanly(self):
        """Test that reply headings are not backslash-escaped."""
        extracted = ExtractedDocument(title="Thread", body_html="<p>Opening post</p>")
        raw = RawDocument(html="<html></html>", source_url="https://www.v2ex.com/t/123")
        replies_html = ReplyFormatter().format([Reply(author="a", body_html="hi")])

        markdown = DocumentAssembler().assemble(extracted, raw, replies_html).markdown

        assert "## Replies (1)" in markdown
        assert "### #1 a" in markdown
        assert "\\" not in markdown
