"""Child-process entry point for PDF text extraction.

Reads PDF bytes from stdin and writes one JSON object to stdout:
``{"text": ..., "page_count": ...}`` on success or ``{"error": ...}``.
Used as a fallback when in-process extraction fails, so a crash inside the
PDF engine cannot take down the worker.
"""

import argparse
import json
import sys

from ingestion.extraction.exceptions import PdfExtractionError
from ingestion.extraction.pdf.factory import PdfExtractorFactory


def run(engine: str, pdf_bytes: bytes) -> dict[str, object]:
    try:
        result = PdfExtractorFactory.for_engine(engine).extract(pdf_bytes)
    except (PdfExtractionError, ValueError) as exc:
        return {"error": str(exc)}
    return {"text": result.text, "page_count": result.page_count}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract PDF text from stdin")
    parser.add_argument("--engine", default="pdfplumber")
    args = parser.parse_args(argv)

    payload = run(args.engine, sys.stdin.buffer.read())
    sys.stdout.write(json.dumps(payload, ensure_ascii=False))
    sys.stdout.flush()
    return 1 if "error" in payload else 0


if __name__ == "__main__":
    sys.exit(main())
