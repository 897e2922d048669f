import pytest

from ingestion.extraction.exceptions import OcrError
from ingestion.extraction.rasterizer import PageRasterizer

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestPageRasterizer:
    def test_renders_each_page_as_png(self, multi_page_pdf_bytes: bytes) -> None:
        images = PageRasterizer().rasterize(multi_page_pdf_bytes)
        assert len(images) == 2
        assert all(image.startswith(PNG_SIGNATURE) for image in images)

    def test_limits_number_of_pages(self, multi_page_pdf_bytes: bytes) -> None:
        images = PageRasterizer(max_pages=1).rasterize(multi_page_pdf_bytes)
        assert len(images) == 1

    def test_raises_ocr_error_for_invalid_pdf(self) -> None:
        with pytest.raises(OcrError, match="Failed to rasterize"):
            PageRasterizer().rasterize(b"not a pdf")


class TestScale:
    def test_scales_small_pages_up_to_target(self) -> None:
        rasterizer = PageRasterizer(target_size=2000)
        assert rasterizer._scale_for(500, 1000) == 2.0

    def test_never_scales_below_native_size(self) -> None:
        rasterizer = PageRasterizer(target_size=2000)
        assert rasterizer._scale_for(3000, 4000) == 1.0

    def test_degenerate_page_uses_native_size(self) -> None:
        assert PageRasterizer()._scale_for(0, 0) == 1.0
