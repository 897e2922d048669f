"""Prompt-side topic flag names and their canonical field names.

Prompts ask for hyphenated keys such as ``topic-presupuesto`` while records
store ``topic_presupuesto``. Each mapping is listed explicitly so that other
hyphenated content in a response is never renamed by accident.
"""

from ingestion.classification.models import DocumentType

COMMUNITY_TOPIC_FIELDS: dict[str, str] = {
    "topic-presupuesto": "topic_presupuesto",
    "topic-mantenimiento": "topic_mantenimiento",
    "topic-administracion": "topic_administracion",
    "topic-piscina": "topic_piscina",
    "topic-jardin": "topic_jardin",
    "topic-limpieza": "topic_limpieza",
    "topic-balance": "topic_balance",
    "topic-paqueteria": "topic_paqueteria",
    "topic-energia": "topic_energia",
    "topic-normativa": "topic_normativa",
    "topic-proveedor": "topic_proveedor",
    "topic-dinero": "topic_dinero",
    "topic-ascensor": "topic_ascensor",
    "topic-incendios": "topic_incendios",
    "topic-porteria": "topic_porteria",
}

CONTRACT_TOPIC_FIELDS: dict[str, str] = {
    "topic-mantenimiento": "topic_mantenimiento",
    "topic-jardines": "topic_jardines",
    "topic-ascensores": "topic_ascensores",
    "topic-limpieza": "topic_limpieza",
    "topic-emergencias": "topic_emergencias",
    "topic-instalaciones": "topic_instalaciones",
    "topic-electricidad": "topic_electricidad",
    "topic-seguridad": "topic_seguridad",
    "topic-agua": "topic_agua",
    "topic-gas": "topic_gas",
    "topic-climatizacion": "topic_climatizacion",
    "topic-parking": "topic_parking",
}

TOPIC_FIELDS_BY_TYPE: dict[DocumentType, dict[str, str]] = {
    DocumentType.ACTA: COMMUNITY_TOPIC_FIELDS,
    DocumentType.COMUNICADO: COMMUNITY_TOPIC_FIELDS,
    DocumentType.CONTRATO: CONTRACT_TOPIC_FIELDS,
}


def canonicalize_topics(payload: dict[str, object], mapping: dict[str, str]) -> dict[str, object]:
    """Copy hyphenated topic flags onto their canonical names.

    A canonical key already present in the payload wins over its
    hyphenated variant.
    """
    result = dict(payload)
    for prompt_key, canonical in mapping.items():
        if prompt_key in payload and canonical not in payload:
            result[canonical] = payload[prompt_key]
        result.pop(prompt_key, None)
    return result
