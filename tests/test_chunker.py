from __future__ import annotations

import pytest

from uwchat_backend.services.chunker import chunk_text


class TestChunkText:
    def test_empty_input_gives_no_chunks(self):
        assert chunk_text("") == []

    def test_short_text_is_one_chunk(self):
        assert chunk_text("Engineering 5 is on Ring Road.") == ["Engineering 5 is on Ring Road."]

    @pytest.mark.parametrize("length", [1, 999, 1000, 1001, 2500, 3000])
    def test_chunks_reconstruct_input_and_respect_size(self, length: int):
        text = "".join(chr(ord("a") + i % 26) for i in range(length))

        chunks = chunk_text(text)

        assert "".join(chunks) == text
        assert all(len(c) == 1000 for c in chunks[:-1])
        assert 0 < len(chunks[-1]) <= 1000

    def test_custom_chunk_size(self):
        assert chunk_text("abcdefg", chunk_size=3) == ["abc", "def", "g"]

    def test_whitespace_is_preserved(self):
        text = "  line one\n\n  line two  "
        assert "".join(chunk_text(text, chunk_size=4)) == text

    def test_non_positive_chunk_size_rejected(self):
        with pytest.raises(ValueError):
            chunk_text("abc", chunk_size=-1)
