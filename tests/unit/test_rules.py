from ingestion.validation.rules import (
    CUSTOM_RULES,
    amount_in_words,
    array_count_matches,
    date_order,
    min_length,
    not_greater_than,
    requires_any,
)


class TestDateOrder:
    def test_end_after_start_passes(self) -> None:
        data = {"fecha_inicio": "2024-01-01", "fecha_fin": "2024-12-31"}
        assert date_order(data, start="fecha_inicio", end="fecha_fin").valid

    def test_same_day_passes(self) -> None:
        data = {"fecha_inicio": "2024-01-01", "fecha_fin": "2024-01-01"}
        assert date_order(data, start="fecha_inicio", end="fecha_fin").valid

    def test_end_before_start_fails(self) -> None:
        data = {"fecha_inicio": "2024-06-01", "fecha_fin": "2024-01-01"}

        outcome = date_order(data, start="fecha_inicio", end="fecha_fin")

        assert not outcome.valid
        assert outcome.error == "fecha_fin must not be earlier than fecha_inicio"

    def test_missing_date_passes(self) -> None:
        assert date_order({"fecha_inicio": "2024-06-01"}, start="fecha_inicio", end="fecha_fin").valid


class TestArrayCountMatches:
    def test_matching_count(self) -> None:
        data = {"products_count": 2, "products": [{}, {}]}
        assert array_count_matches(data, count="products_count", items="products").valid

    def test_mismatch_fails(self) -> None:
        data = {"products_count": 3, "products": [{}]}

        outcome = array_count_matches(data, count="products_count", items="products")

        assert not outcome.valid
        assert "(3)" in (outcome.error or "")

    def test_empty_list_is_not_checked(self) -> None:
        data = {"products_count": 3, "products": []}
        assert array_count_matches(data, count="products_count", items="products").valid


class TestRequiresAny:
    def test_one_non_empty_field_is_enough(self) -> None:
        data = {"products_summary": "Limpieza", "products": []}
        assert requires_any(data, fields=["products_summary", "products"]).valid

    def test_blank_string_and_empty_list_fail(self) -> None:
        data = {"products_summary": "  ", "products": []}

        outcome = requires_any(data, fields=["products_summary", "products"])

        assert not outcome.valid
        assert outcome.error == "At least one of products_summary, products is required"


class TestScalarRules:
    def test_min_length(self) -> None:
        assert not min_length({"summary": "corto"}, field="summary", length=20).valid
        assert min_length({"summary": "x" * 20}, field="summary", length=20).valid
        assert min_length({}, field="summary", length=20).valid

    def test_not_greater_than(self) -> None:
        data = {"superficie_util": 90, "superficie_m2": 80}
        assert not not_greater_than(data, field="superficie_util", limit="superficie_m2").valid
        data = {"superficie_util": 70, "superficie_m2": 80}
        assert not_greater_than(data, field="superficie_util", limit="superficie_m2").valid

    def test_amount_in_words(self) -> None:
        params = {"number": "precio_venta", "words": "precio_en_letras", "min_length": 10}
        good = {"precio_venta": 150000, "precio_en_letras": "ciento cincuenta mil euros"}
        short = {"precio_venta": 150000, "precio_en_letras": "150k"}

        assert amount_in_words(good, **params).valid
        assert not amount_in_words(short, **params).valid
        assert amount_in_words({"precio_venta": 150000}, **params).valid

    def test_amount_in_words_needs_numeric_amount(self) -> None:
        params = {"number": "precio_venta", "words": "precio_en_letras", "min_length": 10}
        data = {"precio_venta": "mucho", "precio_en_letras": "ciento cincuenta mil euros"}

        outcome = amount_in_words(data, **params)

        assert outcome.error == "precio_venta must be numeric"


def test_registry_exposes_every_rule() -> None:
    assert set(CUSTOM_RULES) == {
        "date_order",
        "array_count_matches",
        "requires_any",
        "min_length",
        "not_greater_than",
        "amount_in_words",
    }
