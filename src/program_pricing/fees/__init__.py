"""Fee resolution module.

Turns stored tier, global and brand fee settings into the FeeConfig the
pricing engine consumes.
"""

from program_pricing.fees.resolution import (
    DEFAULT_MERCHANT_FEE_PERCENT,
    DEFAULT_PLATFORM_FEE_PERCENT,
    TierFees,
    fee_config_from_payload,
    load_tier_fees,
    parse_percent,
    percent_to_fraction,
    resolve_fee_config,
    resolve_merchant_fee_percent,
    resolve_platform_fee_percent,
)

__all__ = [
    "DEFAULT_MERCHANT_FEE_PERCENT",
    "DEFAULT_PLATFORM_FEE_PERCENT",
    "TierFees",
    "fee_config_from_payload",
    "load_tier_fees",
    "parse_percent",
    "percent_to_fraction",
    "resolve_fee_config",
    "resolve_merchant_fee_percent",
    "resolve_platform_fee_percent",
]
