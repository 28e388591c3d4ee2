"""Tests for product catalog normalization."""

from decimal import Decimal

import polars as pl

from program_pricing.ingest.normalizers import (
    apply_column_mapping,
    catalog_to_products,
    normalize_catalog,
)


class TestColumnMapping:
    """Tests for column mapping/renaming."""

    def test_apply_column_mapping(self) -> None:
        """Should rename columns according to mapping."""
        df = pl.DataFrame(
            {
                "pharmacyWholesaleCost": [40.0, 55.0],
                "name": ["Semaglutide", "Tirzepatide"],
                "Other": [1, 2],
            }
        )
        mapping = {
            "pharmacyWholesaleCost": "Product Cost",
            "name": "Name",
            "Missing": "WontRename",
        }

        result = apply_column_mapping(df, mapping)

        assert "Product Cost" in result.columns
        assert "Name" in result.columns
        assert "pharmacyWholesaleCost" not in result.columns
        assert "Other" in result.columns  # Unmapped columns preserved

    def test_apply_column_mapping_empty(self) -> None:
        """Empty mapping should return unchanged DataFrame."""
        df = pl.DataFrame({"A": [1], "B": [2]})

        assert apply_column_mapping(df, {}).columns == ["A", "B"]

    def test_never_renames_onto_existing_column(self) -> None:
        """An existing standard column wins over an alias."""
        df = pl.DataFrame({"Name": ["Kept"], "name": ["Alias"]})

        result = apply_column_mapping(df, {"name": "Name"})

        assert result["Name"][0] == "Kept"
        assert "name" in result.columns

    def test_first_alias_wins(self) -> None:
        """Two aliases for one target rename only the first."""
        df = pl.DataFrame({"id": ["a"], "productId": ["b"]})

        result = apply_column_mapping(df, {"id": "Product ID", "productId": "Product ID"})

        assert result["Product ID"][0] == "a"
        assert "productId" in result.columns


class TestCatalogNormalization:
    """Tests for catalog normalization."""

    def test_normalize_catalog_standard_columns(
        self, sample_raw_catalog_df: pl.DataFrame
    ) -> None:
        """Export column names should map to the standard schema."""
        result = normalize_catalog(sample_raw_catalog_df)

        for column in [
            "Product ID",
            "Name",
            "Product Cost",
            "Shipping Cost",
            "Telehealth Cost",
        ]:
            assert column in result.columns
        assert result.height == 3

    def test_product_cost_falls_back_to_price(
        self, sample_raw_catalog_df: pl.DataFrame
    ) -> None:
        """Rows without a wholesale cost should use list price."""
        result = normalize_catalog(sample_raw_catalog_df)

        assert result["Product Cost"].to_list() == [40.0, 30.0, 120.0]

    def test_price_only_catalog(self) -> None:
        """A catalog with only a price column should use it as product cost."""
        df = pl.DataFrame({"id": ["a"], "price": [45.0]})

        result = normalize_catalog(df)

        assert result["Product Cost"][0] == 45.0

    def test_default_shipping_cost(self, sample_raw_catalog_df: pl.DataFrame) -> None:
        """Missing shipping costs should take the default."""
        result = normalize_catalog(sample_raw_catalog_df)

        assert result["Shipping Cost"].to_list() == [10.0, 9.99, 15.0]

    def test_custom_default_shipping_cost(self) -> None:
        """Caller-supplied shipping default applies to every missing row."""
        df = pl.DataFrame({"id": ["a", "b"], "price": [10.0, 20.0]})

        result = normalize_catalog(df, default_shipping_cost=Decimal("12.50"))

        assert result["Shipping Cost"].to_list() == [12.5, 12.5]

    def test_missing_telehealth_is_zero(self) -> None:
        """Catalogs without telehealth cost should default to zero."""
        df = pl.DataFrame({"id": ["a"], "price": [10.0]})

        assert normalize_catalog(df)["Telehealth Cost"][0] == 0.0

    def test_negative_costs_clipped(self, sample_raw_catalog_df: pl.DataFrame) -> None:
        """Negative costs should be clipped to zero."""
        result = normalize_catalog(sample_raw_catalog_df)

        assert result["Telehealth Cost"].to_list() == [25.0, 0.0, 0.0]

    def test_product_id_is_string(self) -> None:
        """Numeric product IDs should become strings."""
        df = pl.DataFrame({"productId": [101, 102], "price": [10.0, 20.0]})

        result = normalize_catalog(df)

        assert result.schema["Product ID"] == pl.String
        assert result["Product ID"].to_list() == ["101", "102"]


class TestCatalogToProducts:
    """Tests for ProductCost conversion."""

    def test_builds_products(self, sample_raw_catalog_df: pl.DataFrame) -> None:
        """Each catalog row should become a ProductCost."""
        products = catalog_to_products(normalize_catalog(sample_raw_catalog_df))

        assert [p.product_id for p in products] == ["prod-001", "prod-002", "prod-003"]
        semaglutide = products[0]
        assert semaglutide.name == "Semaglutide"
        assert semaglutide.product_cost == Decimal("40")
        assert semaglutide.shipping_cost == Decimal("10")
        assert semaglutide.telehealth_cost == Decimal("25")
        assert semaglutide.total_cogs == Decimal("50")

    def test_amounts_rounded_to_cents(self, sample_raw_catalog_df: pl.DataFrame) -> None:
        """Float costs should arrive as exact cent Decimals."""
        b12 = catalog_to_products(normalize_catalog(sample_raw_catalog_df))[1]

        assert b12.shipping_cost == Decimal("9.99")
        assert b12.total_cogs == Decimal("39.99")

    def test_null_cost_is_zero(self) -> None:
        """Rows with no cost at all should not break conversion."""
        raw = pl.DataFrame(
            {"id": ["a"], "pharmacyWholesaleCost": [None]},
            schema_overrides={"pharmacyWholesaleCost": pl.Float64},
        )

        df = normalize_catalog(raw)

        product = catalog_to_products(df)[0]

        assert product.product_cost == Decimal("0")
        assert product.shipping_cost == Decimal("9.99")
