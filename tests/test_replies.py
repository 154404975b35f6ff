"""Tests for reply formatting."""

from webclipper.models.document import Reply
from webclipper.replies import ReplyFormatter


class TestReplyFormatter:
    """Tests for ReplyFormatter."""

    def test_layout(self):
        """Test heading, numbering, like badges and separators."""
        replies = [
            Reply(author="alice", body_html="<p>First</p>", like_count=3),
            Reply(author="bob", body_html="Second"),
        ]
        assert ReplyFormatter().format(replies) == "\n".join(
            [
                "<h2>Replies (2)</h2>",
                "<h3>#1 alice <strong>❤️ 3</strong></h3>",
                "<div><p>First</p></div>",
                "<hr>",
                "<h3>#2 bob</h3>",
                "<div>Second</div>",
            ]
        )

    def test_separators_between_replies_only(self):
        replies = [Reply(author=f"u{i}", body_html=f"r{i}") for i in range(4)]
        output = ReplyFormatter().format(replies)
        assert output.count("<hr>") == 3
        assert not output.endswith("<hr>")

    def test_order_preserved(self):
        replies = [Reply(author="z", body_html="last?"), Reply(author="a", body_html="first?")]
        output = ReplyFormatter().format(replies)
        assert output.index("#1 z") < output.index("#2 a")

    def test_blank_bodies_excluded(self):
        """Test that blank replies are dropped from the count and numbering."""
        replies = [
            Reply(author="a", body_html="   "),
            Reply(author="b", body_html="kept"),
            Reply(author="c", body_html=""),
        ]
        output = ReplyFormatter().format(replies)
        assert output.startswith("<h2>Replies (1)</h2>")
        assert "#1 b" in output
        assert "<hr>" not in output

    def test_markup_without_text_excluded(self):
        """Test that bodies of bare markup count as blank."""
        replies = [Reply(author="a", body_html="<p> </p>"), Reply(author="b", body_html="&nbsp;<br>")]
        assert ReplyFormatter().format(replies) == ""

    def test_image_only_body_kept(self):
        output = ReplyFormatter().format([Reply(author="a", body_html='<img src="https://i.v2ex.co/x.png">')])
        assert output.startswith("<h2>Replies (1)</h2>")
        assert "i.v2ex.co/x.png" in output

    def test_empty(self):
        assert ReplyFormatter().format([]) == ""
        assert ReplyFormatter().format([Reply(author="a", body_html=" ")]) == ""

    def test_author_escaped(self):
        output = ReplyFormatter().format([Reply(author="<b>x</b>", body_html="y")])
        assert "&lt;b&gt;x&lt;/b&gt;" in output

    def test_custom_heading(self):
        output = ReplyFormatter(heading="回复").format([Reply(author="a", body_html="b")])
        assert output.startswith("<h2>回复 (1)</h2>")
