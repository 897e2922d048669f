import pymupdf

from ingestion.extraction.exceptions import OcrError


class PageRasterizer:
    """Renders PDF pages to PNG images suitable for OCR."""

    def __init__(self, *, max_pages: int = 5, target_size: int = 2000) -> None:
        self._max_pages = max_pages
        self._target_size = target_size

    def rasterize(self, pdf_bytes: bytes) -> list[bytes]:
        """Render up to ``max_pages`` pages.

        Pages are scaled so their longer side reaches ``target_size`` pixels;
        pages that are already larger are rendered at their native size.

        Raises:
            OcrError: if the PDF cannot be opened or rendered.
        """
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                images = []
                for index in range(min(doc.page_count, self._max_pages)):
                    page = doc[index]
                    scale = self._scale_for(page.rect.width, page.rect.height)
                    pixmap = page.get_pixmap(matrix=pymupdf.Matrix(scale, scale))
                    images.append(pixmap.tobytes("png"))
        except Exception as exc:
            raise OcrError(f"Failed to rasterize PDF: {exc}") from exc
        return images

    def _scale_for(self, width: float, height: float) -> float:
        longest = max(width, height)
        if longest <= 0:
            return 1.0
        return max(1.0, self._target_size / longest)
