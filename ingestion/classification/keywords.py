from ingestion.classification.models import DocumentType

# Order matters: the first type with a matching keyword wins.
FILENAME_KEYWORDS: tuple[tuple[DocumentType, tuple[str, ...]], ...] = (
    (
        DocumentType.ACTA,
        (
            "acta", "junta", "reunion", "reunión", "asamblea", "orden_del_dia",
            "extraordinaria", "ordinaria", "consejo",
        ),
    ),
    (DocumentType.FACTURA, ("factura", "invoice", "recibo", "fra_", "fra-")),
    (DocumentType.ALBARAN, ("albaran", "albarán", "entrega", "delivery")),
    (
        DocumentType.PRESUPUESTO,
        ("presupuesto", "cotizacion", "cotización", "oferta", "estimate"),
    ),
    (DocumentType.CONTRATO, ("contrato", "contract", "acuerdo", "convenio", "servicio")),
    (DocumentType.ESCRITURA, ("escritura", "compraventa", "notaria", "notaría", "deed")),
    (
        DocumentType.COMUNICADO,
        (
            "comunicado", "aviso", "circular", "notificacion", "notificación",
            "informacion", "información",
        ),
    ),
)


def match_filename(filename: str) -> DocumentType | None:
    """Return the first document type whose keyword appears in the filename."""
    lowered = filename.lower()
    for document_type, keywords in FILENAME_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return document_type
    return None
