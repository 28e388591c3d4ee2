"""Shared pytest fixtures for program pricing tests."""

import os
from collections.abc import Generator
from decimal import Decimal
from unittest.mock import patch

import polars as pl
import pytest

from program_pricing.config import Settings
from program_pricing.models import FeeConfig, MultiMonthPlan, PricingInput, ProductCost


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Set up mock environment variables for testing.

    Yields:
        Dictionary of mock environment variables.
    """
    env_vars = {
        "LOG_LEVEL": "DEBUG",
        "DATA_DIR": "/tmp/test_catalog",
        "DEFAULT_PLATFORM_FEE_PERCENT": "30",
        "DEFAULT_MERCHANT_FEE_PERCENT": "1.5",
        "DEFAULT_SHIPPING_COST": "12.50",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def test_settings(mock_env_vars: dict[str, str]) -> Settings:
    """Settings loaded from the mock environment."""
    return Settings.from_env()


@pytest.fixture
def sample_product() -> ProductCost:
    """Weight-loss style product with a month-1 consult.

    Returns:
        ProductCost with $40 product, $10 shipping, $25 telehealth.
    """
    return ProductCost(
        product_cost=Decimal("40"),
        shipping_cost=Decimal("10"),
        telehealth_cost=Decimal("25"),
        product_id="prod-001",
        name="Semaglutide",
    )


@pytest.fixture
def sample_product_no_telehealth() -> ProductCost:
    """Product without a consult cost."""
    return ProductCost(
        product_cost=Decimal("40"),
        shipping_cost=Decimal("10"),
        telehealth_cost=Decimal("0"),
        product_id="prod-002",
        name="Vitamin B12",
    )


@pytest.fixture
def sample_fees() -> FeeConfig:
    """Default fee configuration: 15% platform, 2% merchant."""
    return FeeConfig(
        platform_fee_percent=Decimal("0.15"),
        merchant_service_fee_percent=Decimal("0.02"),
    )


@pytest.fixture
def sample_pricing() -> PricingInput:
    """$100 fee with a 10% month-1 discount and two prepay plans."""
    return PricingInput(
        non_medical_fee=Decimal("100"),
        monthly_discount_percent=Decimal("10"),
        multi_month_plans=[
            MultiMonthPlan(months=3, discount_percent=Decimal("10")),
            MultiMonthPlan(months=6, discount_percent=Decimal("5")),
        ],
    )


@pytest.fixture
def sample_raw_catalog_df() -> pl.DataFrame:
    """Raw catalog export as it comes from the product catalog.

    Returns:
        Polars DataFrame using catalog export column names.
    """
    return pl.DataFrame(
        {
            "id": ["prod-001", "prod-002", "prod-003"],
            "name": ["Semaglutide", "Vitamin B12", "Tirzepatide"],
            "pharmacyWholesaleCost": [40.0, None, 120.0],
            "price": [45.0, 30.0, 150.0],
            "shippingCost": [10.0, None, 15.0],
            "telehealthCost": [25.0, 0.0, -5.0],
        }
    )


@pytest.fixture
def sample_tier_fee_df() -> pl.DataFrame:
    """Tier configuration table with fee overrides."""
    return pl.DataFrame(
        {
            "planType": ["entry", "standard", "enterprise"],
            "fuseFeePercent": [80.0, 30.0, None],
            "merchantServiceFeePercent": [2.0, 2.0, None],
        }
    )
