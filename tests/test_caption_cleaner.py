"""
Tests for caption text normalization.
"""

import pytest

from src.yt_news_feed.caption_cleaner import clean_caption, decode_entities, extract_clean_captions


class TestCleanCaption:

    def test_decodes_entities_and_collapses_whitespace(self):
        assert clean_caption("It&#39;s  a\n\n test") == "It's a test"

    def test_double_encoded_apostrophe(self):
        assert clean_caption("don&amp;#39;t panic") == "don't panic"

    def test_named_entities(self):
        assert clean_caption("Q&amp;A &quot;live&quot; &lt;now&gt;") == 'Q&A "live" <now>'

    def test_trims_edges(self):
        assert clean_caption("  \t hello world \n") == "hello world"

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty_input(self, raw):
        assert clean_caption(raw) == ""

    @pytest.mark.parametrize("raw", [
        "plain text",
        "It&#39;s  a\n test",
        "don&amp;#39;t",
        "&amp;amp;lt;b&amp;amp;gt;",
        "Q&amp;A   &nbsp; session",
    ])
    def test_idempotent(self, raw):
        once = clean_caption(raw)
        assert clean_caption(once) == once


class TestDecodeEntities:

    def test_decodes_to_fixed_point(self):
        assert decode_entities("&amp;amp;amp;") == "&"

    def test_plain_text_unchanged(self):
        assert decode_entities("nothing to decode") == "nothing to decode"


class TestExtractCleanCaptions:

    def test_keys_by_title_and_drops_empty_categories(self):
        enhanced = {
            "Top news": [
                {"title": "Storm update", "captions": "Heavy&amp;#39;s   rain"},
                {"title": "No captions", "captions": None},
            ],
            "Sports": [
                {"title": "Match", "captions": ""},
            ],
        }

        result = extract_clean_captions(enhanced)

        assert result == {"Top news": {"Storm update": "Heavy's rain"}}

    def test_empty_dataset(self):
        assert extract_clean_captions({}) == {}
