from ingestion.classification.models import DocumentType
from ingestion.metadata.topics import (
    COMMUNITY_TOPIC_FIELDS,
    CONTRACT_TOPIC_FIELDS,
    TOPIC_FIELDS_BY_TYPE,
    canonicalize_topics,
)


class TestCanonicalizeTopics:
    def test_renames_hyphenated_flags(self) -> None:
        result = canonicalize_topics({"topic-piscina": True}, COMMUNITY_TOPIC_FIELDS)

        assert result == {"topic_piscina": True}

    def test_canonical_key_wins(self) -> None:
        payload = {"topic-piscina": True, "topic_piscina": False}

        result = canonicalize_topics(payload, COMMUNITY_TOPIC_FIELDS)

        assert result == {"topic_piscina": False}

    def test_leaves_unmapped_hyphenated_keys_alone(self) -> None:
        payload = {"fecha-limite": "2024-01-01", "topic-jardines": True}

        result = canonicalize_topics(payload, COMMUNITY_TOPIC_FIELDS)

        assert result == payload

    def test_does_not_mutate_input(self) -> None:
        payload = {"topic-gas": True}

        canonicalize_topics(payload, CONTRACT_TOPIC_FIELDS)

        assert payload == {"topic-gas": True}


class TestTopicMappings:
    def test_types_with_topics(self) -> None:
        assert TOPIC_FIELDS_BY_TYPE[DocumentType.ACTA] is COMMUNITY_TOPIC_FIELDS
        assert TOPIC_FIELDS_BY_TYPE[DocumentType.COMUNICADO] is COMMUNITY_TOPIC_FIELDS
        assert TOPIC_FIELDS_BY_TYPE[DocumentType.CONTRATO] is CONTRACT_TOPIC_FIELDS
        assert DocumentType.FACTURA not in TOPIC_FIELDS_BY_TYPE

    def test_every_canonical_name_is_underscored(self) -> None:
        for mapping in (COMMUNITY_TOPIC_FIELDS, CONTRACT_TOPIC_FIELDS):
            for prompt_key, canonical in mapping.items():
                assert canonical == prompt_key.replace("-", "_")
