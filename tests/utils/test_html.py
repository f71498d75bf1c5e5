"""Tests for HTML to text conversion."""

from parcelparse.utils.html import html_to_text, strip_tags


class TestHtmlToText:
    def test_block_elements_become_lines(self):
        text = html_to_text("<p>Your order</p><p>Classic Tee</p>")
        assert text.splitlines() == ["Your order", "Classic Tee"]

    def test_scripts_and_styles_removed(self):
        html = "<style>p{color:red}</style><script>var x=1;</script><p>Hello</p>"
        assert html_to_text(html) == "Hello"

    def test_entities_decoded(self):
        assert html_to_text("<p>Tom &amp; Co</p>") == "Tom & Co"

    def test_empty(self):
        assert html_to_text(None) == ""


class TestStripTags:
    def test_fragment(self):
        assert strip_tags("<td><b>Royal Mail</b> parcel</td>") == "Royal Mail parcel"
