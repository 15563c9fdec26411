"""Tests for image attachment embedding."""

from myst2ipynb.models import ImageData
from myst2ipynb.transforms.attachments import (
    attachment_basename,
    embed_images_as_attachments,
    unique_attachment_name,
)


def png(data: str) -> ImageData:
    return ImageData(mime="image/png", data=data)


class TestEmbedImagesAsAttachments:
    """Tests for embed_images_as_attachments."""

    def test_replaces_image_url_with_attachment(self):
        """Test a matching URL is rewritten and its data attached."""
        result = embed_images_as_attachments(
            "![Chart](/_static/img/chart.png)",
            {"/_static/img/chart.png": png("base64data")},
        )

        assert result.md == "![Chart](attachment:chart.png)"
        assert result.attachments == {"chart.png": {"image/png": "base64data"}}

    def test_handles_multiple_images(self):
        """Test several images in one cell."""
        md = "![A](/_static/a.png)\n\n![B](/_static/b.jpg)"
        result = embed_images_as_attachments(
            md,
            {
                "/_static/a.png": png("AAAA"),
                "/_static/b.jpg": ImageData(mime="image/jpeg", data="BBBB"),
            },
        )

        assert result.md == "![A](attachment:a.png)\n\n![B](attachment:b.jpg)"
        assert result.attachments == {
            "a.png": {"image/png": "AAAA"},
            "b.jpg": {"image/jpeg": "BBBB"},
        }

    def test_deduplicates_same_basename(self):
        """Test distinct URLs sharing a basename get numbered names in order."""
        md = "![A](/dir1/img.png)\n\n![B](/dir2/img.png)"
        result = embed_images_as_attachments(
            md,
            {"/dir1/img.png": png("AAAA"), "/dir2/img.png": png("BBBB")},
        )

        assert result.md == "![A](attachment:img.png)\n\n![B](attachment:img_1.png)"
        assert list(result.attachments) == ["img.png", "img_1.png"]
        assert result.attachments["img_1.png"] == {"image/png": "BBBB"}

    def test_counter_keeps_incrementing(self):
        """Test a third collision gets _2."""
        md = "![](/a/x.png) ![](/b/x.png) ![](/c/x.png)"
        result = embed_images_as_attachments(
            md,
            {"/a/x.png": png("A"), "/b/x.png": png("B"), "/c/x.png": png("C")},
        )

        assert result.md == "![](attachment:x.png) ![](attachment:x_1.png) ![](attachment:x_2.png)"

    def test_same_url_twice_reuses_attachment(self):
        """Test a repeated URL shares one attachment entry."""
        md = "![First](/a.png)\n\n![Second](/a.png)"
        result = embed_images_as_attachments(md, {"/a.png": png("AAAA")})

        assert result.md == "![First](attachment:a.png)\n\n![Second](attachment:a.png)"
        assert result.attachments == {"a.png": {"image/png": "AAAA"}}

    def test_skips_images_not_in_data(self):
        """Test unknown URLs are left alone."""
        md = "![A](/a.png)\n\n![B](/b.png)"
        result = embed_images_as_attachments(md, {"/a.png": png("AAAA")})

        assert result.md == "![A](attachment:a.png)\n\n![B](/b.png)"
        assert result.attachments == {"a.png": {"image/png": "AAAA"}}

    def test_empty_image_data_returns_input(self):
        """Test an empty map returns the markdown and no attachments."""
        result = embed_images_as_attachments("![A](/a.png)", {})

        assert result.md == "![A](/a.png)"
        assert result.attachments is None

    def test_no_match_returns_input(self):
        """Test attachments are None, not an empty dict, when nothing matched."""
        result = embed_images_as_attachments("![A](/a.png)", {"/other.png": png("XXXX")})

        assert result.md == "![A](/a.png)"
        assert result.attachments is None

    def test_image_without_alt_text(self):
        """Test empty alt text is kept empty."""
        result = embed_images_as_attachments("![](/_static/chart.png)", {"/_static/chart.png": png("DATA")})

        assert result.md == "![](attachment:chart.png)"
        assert result.attachments == {"chart.png": {"image/png": "DATA"}}

    def test_image_with_title(self):
        """Test a quoted title is matched and dropped from the rewrite."""
        result = embed_images_as_attachments('![A](/a.png "A title")', {"/a.png": png("AAAA")})

        assert result.md == "![A](attachment:a.png)"

    def test_escaped_parentheses_in_url(self):
        """Test serializer-escaped parentheses are unescaped before lookup."""
        md = r"![Plot](/img/plot\(1\).png)"
        result = embed_images_as_attachments(md, {"/img/plot(1).png": png("AAAA")})

        assert result.md == "![Plot](attachment:plot(1).png)"
        assert "plot(1).png" in result.attachments

    def test_escaped_brackets_in_alt(self):
        """Test escaped brackets in alt text are kept verbatim."""
        md = r"![a \[b\] c](/a.png)"
        result = embed_images_as_attachments(md, {"/a.png": png("AAAA")})

        assert result.md == r"![a \[b\] c](attachment:a.png)"

    def test_surrounding_text_is_preserved(self):
        """Test text around the image is untouched."""
        md = "See ![A](/a.png) here, and [a link](/a.png)."
        result = embed_images_as_attachments(md, {"/a.png": png("AAAA")})

        assert result.md == "See ![A](attachment:a.png) here, and [a link](/a.png)."

    def test_angle_bracket_destination(self):
        """Test a URL with spaces written in angle brackets is embedded."""
        md = "![C](</img/my chart.png>) and ![D](</img/my chart.png> \"Title\")"
        result = embed_images_as_attachments(md, {"/img/my chart.png": png("AAAA")})

        assert result.md == "![C](attachment:my_chart.png) and ![D](attachment:my_chart.png)"
        assert result.attachments == {"my_chart.png": {"image/png": "AAAA"}}

    def test_escaped_angle_brackets_in_url(self):
        """Test escaped angle brackets are unescaped before lookup."""
        md = r"![C](</a b/\<c\>.png>)"
        result = embed_images_as_attachments(md, {"/a b/<c>.png": png("AAAA")})

        assert result.attachments == {"<c>.png": {"image/png": "AAAA"}}

    def test_result_unpacks(self):
        """Test the result unpacks as (md, attachments)."""
        md, attachments = embed_images_as_attachments("text", {"/a.png": png("AAAA")})

        assert md == "text"
        assert attachments is None


class TestAttachmentNames:
    """Tests for attachment naming helpers."""

    def test_basename_strips_query_and_fragment(self):
        """Test query strings and fragments are removed."""
        assert attachment_basename("/img/a.png?v=2#top") == "a.png"

    def test_basename_of_bare_name(self):
        """Test a URL without slashes is its own basename."""
        assert attachment_basename("chart.svg") == "chart.svg"

    def test_basename_falls_back_to_image(self):
        """Test a URL ending in a slash gets a default name."""
        assert attachment_basename("/static/") == "image"

    def test_unique_name_unused(self):
        """Test an unused name is returned as is."""
        assert unique_attachment_name("a.png", set()) == "a.png"

    def test_unique_name_without_extension(self):
        """Test the counter is appended when there is no extension."""
        assert unique_attachment_name("figure", {"figure"}) == "figure_1"

    def test_unique_name_skips_taken_counters(self):
        """Test counters already in use are skipped."""
        assert unique_attachment_name("a.png", {"a.png", "a_1.png"}) == "a_2.png"

    def test_basename_whitespace_replaced(self):
        """Test whitespace in a file name becomes underscores."""
        assert attachment_basename("/img/my  chart.png") == "my_chart.png"
