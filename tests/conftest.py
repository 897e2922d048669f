import io

import pytest
from reportlab.lib.pagesizes import A4, letter
from reportlab.pdfgen import canvas

INVOICE_LINES = (
    "FACTURA numero FAC-2024-0153",
    "Proveedor: Limpiezas Brillantes Sociedad Limitada, con domicilio en calle Mayor.",
    "Cliente: Comunidad de Propietarios Residencial Los Olivos, Madrid.",
    "Fecha de la factura: quince de marzo de dos mil veinticuatro.",
    "Concepto: servicio mensual de limpieza de zonas comunes y escaleras del edificio.",
    "Importe total de la factura: mil doscientos cincuenta euros, impuestos incluidos.",
    "Forma de pago: transferencia bancaria a treinta dias.",
)


def _pdf_with_lines(*pages: tuple[str, ...], pagesize: tuple[float, float] = letter) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=pagesize)
    for lines in pages:
        y = 760
        for line in lines:
            c.drawString(56, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf_with_lines(("Hello PDF World",))


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf_with_lines(("Page one content",), ("Page two content",))


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf_with_lines(())


@pytest.fixture()
def invoice_pdf_bytes() -> bytes:
    """Generate a one-page Spanish invoice with a usable text layer."""
    return _pdf_with_lines(INVOICE_LINES, pagesize=A4)


@pytest.fixture()
def invoice_text() -> str:
    return "\n".join(INVOICE_LINES)
