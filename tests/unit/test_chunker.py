from ingestion.pipeline.chunker import TextChunker

PARAGRAPH = "La junta aprueba por unanimidad el presupuesto de mantenimiento anual."


class TestTextChunker:
    def test_splits_on_blank_lines(self) -> None:
        text = f"{PARAGRAPH}\n\n{PARAGRAPH} Segundo.\n   \n{PARAGRAPH} Tercero."

        chunks = TextChunker().chunk(text)

        assert len(chunks) == 3
        assert chunks[1].endswith("Segundo.")

    def test_drops_short_paragraphs(self) -> None:
        text = f"Página 1\n\n{PARAGRAPH}\n\nFirma"

        assert TextChunker().chunk(text) == [PARAGRAPH]

    def test_short_text_is_kept_when_nothing_else_remains(self) -> None:
        assert TextChunker().chunk("  Aviso breve  ") == ["Aviso breve"]

    def test_empty_text_has_no_chunks(self) -> None:
        assert TextChunker().chunk("  \n\n ") == []

    def test_long_paragraph_is_cut_at_whitespace(self) -> None:
        text = " ".join(["palabra"] * 100)

        chunks = TextChunker(max_chars=100, min_chars=10).chunk(text)

        assert all(len(chunk) <= 100 for chunk in chunks)
        assert all(not chunk.startswith(" ") and "palabr " not in chunk for chunk in chunks)
        assert " ".join(chunks) == text

    def test_unbroken_text_is_cut_at_limit(self) -> None:
        chunks = TextChunker(max_chars=100, min_chars=10).chunk("x" * 250)
        assert [len(chunk) for chunk in chunks] == [100, 100, 50]
