"""Telehealth Program Pricing Engine.

Derives patient prices, itemized fee deductions and brand profit for
program products, for the standard monthly plan, a month-1 discount and
prepaid multi-month plans.
"""

from program_pricing.config import Settings
from program_pricing.models import (
    FeeConfig,
    MultiMonthPlan,
    PricingBreakdown,
    PricingInput,
    ProductCost,
    ProgramPricing,
)

__version__ = "0.1.0"
__all__ = [
    "Settings",
    "FeeConfig",
    "MultiMonthPlan",
    "PricingBreakdown",
    "PricingInput",
    "ProductCost",
    "ProgramPricing",
]
