"""Tests for schema and pricing input validation."""

from decimal import Decimal

import polars as pl

from program_pricing.ingest.normalizers import normalize_catalog
from program_pricing.ingest.validators import (
    ValidationResult,
    validate_catalog_schema,
    validate_pricing_input,
    validate_tier_fee_schema,
)
from program_pricing.models import FeeConfig, MultiMonthPlan, PricingInput, ProductCost


class TestValidationResult:
    """Tests for ValidationResult dataclass."""

    def test_default_values(self) -> None:
        """ValidationResult should have sensible defaults."""
        result = ValidationResult(is_valid=True, message="OK")

        assert result.missing_columns == []
        assert result.row_count == 0
        assert result.warnings == []


class TestCatalogValidation:
    """Tests for catalog schema validation."""

    def test_valid_catalog_passes(self, sample_raw_catalog_df: pl.DataFrame) -> None:
        """Normalized catalog should pass."""
        result = validate_catalog_schema(normalize_catalog(sample_raw_catalog_df))

        assert result.is_valid is True
        assert result.missing_columns == []
        assert result.row_count == 3
        assert result.warnings == []

    def test_raw_export_fails(self, sample_raw_catalog_df: pl.DataFrame) -> None:
        """Un-normalized export lacks the standard columns."""
        result = validate_catalog_schema(sample_raw_catalog_df)

        assert result.is_valid is False
        assert result.missing_columns == ["Product Cost", "Product ID"]

    def test_missing_optional_columns_warn(self) -> None:
        """Missing name and costs should warn but pass."""
        df = pl.DataFrame({"Product ID": ["a"], "Product Cost": [10.0]})

        result = validate_catalog_schema(df)

        assert result.is_valid is True
        assert len(result.warnings) == 1
        assert "Telehealth Cost" in result.warnings[0]

    def test_null_costs_warn(self) -> None:
        """Products without a cost should be flagged."""
        df = pl.DataFrame(
            {
                "Product ID": ["a", "b"],
                "Name": ["A", "B"],
                "Product Cost": [10.0, None],
                "Shipping Cost": [5.0, 5.0],
                "Telehealth Cost": [0.0, 0.0],
            }
        )

        result = validate_catalog_schema(df)

        assert result.is_valid is True
        assert any("1 products have no cost" in w for w in result.warnings)


class TestTierFeeValidation:
    """Tests for tier fee table validation."""

    def test_valid_table_passes(self, sample_tier_fee_df: pl.DataFrame) -> None:
        """Table with all fee columns should pass."""
        result = validate_tier_fee_schema(sample_tier_fee_df)

        assert result.is_valid is True
        assert result.row_count == 3

    def test_missing_columns_fail(self) -> None:
        """Table without fee columns should fail."""
        result = validate_tier_fee_schema(pl.DataFrame({"planType": ["entry"]}))

        assert result.is_valid is False
        assert result.missing_columns == ["fuseFeePercent", "merchantServiceFeePercent"]


class TestPricingInputValidation:
    """Tests for pricing input checks."""

    def test_clean_input(
        self,
        sample_product: ProductCost,
        sample_fees: FeeConfig,
        sample_pricing: PricingInput,
    ) -> None:
        """Input within the cap should have no warnings."""
        result = validate_pricing_input(sample_product, sample_fees, sample_pricing)

        assert result.is_valid is True
        assert result.warnings == []
        assert result.message == "Pricing input OK"

    def test_every_adjustment_reported(
        self, sample_product: ProductCost, sample_fees: FeeConfig
    ) -> None:
        """Each adjustment should produce one warning, never a failure."""
        pricing = PricingInput(
            non_medical_fee=Decimal("100"),
            monthly_discount_percent=Decimal("60"),
            multi_month_plans=[
                MultiMonthPlan(months=0, discount_percent=Decimal("5")),
                MultiMonthPlan(months=5, discount_percent=Decimal("5")),
                MultiMonthPlan(months=12, discount_percent=Decimal("50")),
            ],
        )

        result = validate_pricing_input(sample_product, sample_fees, pricing)

        assert result.is_valid is True
        assert len(result.warnings) == 4
        assert result.message == "Pricing input has 4 adjustments"
        assert "exceeds maximum 47.05%" in result.warnings[0]
        assert "will be dropped" in result.warnings[1]
        assert "not a standard option" in result.warnings[2]
        assert "12-month plan" in result.warnings[3]

    def test_negative_fee_warns(
        self, sample_product: ProductCost, sample_fees: FeeConfig
    ) -> None:
        """Negative fee is reported as treated as zero."""
        result = validate_pricing_input(
            sample_product, sample_fees, PricingInput(non_medical_fee=Decimal("-5"))
        )

        assert result.is_valid is True
        assert "treated as $0" in result.warnings[0]

    def test_negative_discounts_warn(
        self, sample_product: ProductCost, sample_fees: FeeConfig
    ) -> None:
        """Negative month-1 and plan discounts are reported as treated as zero."""
        pricing = PricingInput(
            non_medical_fee=Decimal("100"),
            monthly_discount_percent=Decimal("-10"),
            multi_month_plans=[MultiMonthPlan(months=3, discount_percent=Decimal("-5"))],
        )

        result = validate_pricing_input(sample_product, sample_fees, pricing)

        assert result.warnings == [
            "Negative month-1 discount -10% treated as 0%",
            "3-month plan discount -5% treated as 0%",
        ]

    def test_low_fee_flags_any_discount(
        self, sample_product: ProductCost, sample_fees: FeeConfig
    ) -> None:
        """With no headroom any discount exceeds the cap."""
        result = validate_pricing_input(
            sample_product,
            sample_fees,
            PricingInput(
                non_medical_fee=Decimal("20"),
                monthly_discount_percent=Decimal("1"),
            ),
        )

        assert "exceeds maximum 0%" in result.warnings[0]
