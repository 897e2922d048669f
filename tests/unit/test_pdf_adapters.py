import pytest

from ingestion.extraction.exceptions import PdfExtractionError
from ingestion.extraction.models import PdfText
from ingestion.extraction.pdf.base import BasePdfExtractor
from ingestion.extraction.pdf.pdfplumber_adapter import PdfPlumberAdapter
from ingestion.extraction.pdf.pymupdf_adapter import PyMuPdfAdapter


@pytest.fixture(params=[PdfPlumberAdapter, PyMuPdfAdapter], ids=["pdfplumber", "pymupdf"])
def adapter(request: pytest.FixtureRequest) -> BasePdfExtractor:
    return request.param()


class TestPdfAdapters:
    def test_extract_returns_text_and_page_count(
        self, adapter: BasePdfExtractor, sample_pdf_bytes: bytes
    ) -> None:
        result = adapter.extract(sample_pdf_bytes)
        assert isinstance(result, PdfText)
        assert "Hello PDF World" in result.text
        assert result.page_count == 1

    def test_extract_multi_page(
        self, adapter: BasePdfExtractor, multi_page_pdf_bytes: bytes
    ) -> None:
        result = adapter.extract(multi_page_pdf_bytes)
        assert "Page one content" in result.text
        assert "Page two content" in result.text
        assert result.page_count == 2

    def test_extract_empty_pdf_returns_empty_text(
        self, adapter: BasePdfExtractor, empty_pdf_bytes: bytes
    ) -> None:
        result = adapter.extract(empty_pdf_bytes)
        assert result.text == ""
        assert result.page_count == 1

    def test_extract_raises_on_invalid_bytes(self, adapter: BasePdfExtractor) -> None:
        with pytest.raises(PdfExtractionError):
            adapter.extract(b"not a pdf")

    def test_extract_result_is_stripped(
        self, adapter: BasePdfExtractor, sample_pdf_bytes: bytes
    ) -> None:
        result = adapter.extract(sample_pdf_bytes)
        assert result.text == result.text.strip()

    def test_adapter_has_engine_name(self, adapter: BasePdfExtractor) -> None:
        assert adapter.name in {"pdfplumber", "pymupdf"}
