"""Computation module for the program pricing engine.

This module handles:
- Discount cap and clamping
- Standard, month-1 and multi-month prepay breakdowns
- Fee sensitivity and catalog-wide pricing tables
"""

from program_pricing.compute.breakdown import (
    analyze_product_pricing,
    calculate_fee_sensitivity,
    calculate_month1_breakdown,
    calculate_multi_month_breakdown,
    calculate_standard_breakdown,
    compute_deductions,
)
from program_pricing.compute.discounts import (
    calculate_max_discount_percent,
    calculate_min_fee_required,
    clamp_discount,
    clamp_pricing_input,
)
from program_pricing.compute.program_table import analyze_catalog, build_pricing_table
from program_pricing.money import (
    clamp_non_negative,
    finite_or_zero,
    round2,
    to_decimal,
)

__all__ = [
    # Breakdowns
    "compute_deductions",
    "calculate_standard_breakdown",
    "calculate_month1_breakdown",
    "calculate_multi_month_breakdown",
    "analyze_product_pricing",
    "calculate_fee_sensitivity",
    # Discounts
    "calculate_min_fee_required",
    "calculate_max_discount_percent",
    "clamp_discount",
    "clamp_pricing_input",
    # Money
    "round2",
    "finite_or_zero",
    "to_decimal",
    "clamp_non_negative",
    # Catalog
    "analyze_catalog",
    "build_pricing_table",
]
