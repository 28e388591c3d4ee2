"""Configuration management for the program pricing engine."""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

from program_pricing.fees.resolution import (
    DEFAULT_MERCHANT_FEE_PERCENT,
    DEFAULT_PLATFORM_FEE_PERCENT,
    resolve_fee_config,
)
from program_pricing.models import FeeConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        log_level: Logging verbosity level.
        data_dir: Directory holding product catalog files.
        default_platform_fee_percent: Platform fee (whole percent) when no
            tier or global fee is configured.
        default_merchant_fee_percent: Merchant fee (whole percent) when no
            brand or tier fee is configured.
        default_shipping_cost: Shipping cost for catalog rows without one.
    """

    log_level: str
    data_dir: Path
    default_platform_fee_percent: Decimal
    default_merchant_fee_percent: Decimal
    default_shipping_cost: Decimal

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Returns:
            Settings instance with loaded configuration.
        """
        load_dotenv()

        log_level = os.getenv("LOG_LEVEL", "INFO")
        data_dir = Path(os.getenv("DATA_DIR", "./data/catalog"))
        platform_fee = Decimal(
            os.getenv("DEFAULT_PLATFORM_FEE_PERCENT", str(DEFAULT_PLATFORM_FEE_PERCENT))
        )
        merchant_fee = Decimal(
            os.getenv("DEFAULT_MERCHANT_FEE_PERCENT", str(DEFAULT_MERCHANT_FEE_PERCENT))
        )
        shipping_cost = Decimal(os.getenv("DEFAULT_SHIPPING_COST", "9.99"))

        logger.debug(
            f"Loaded settings: log_level={log_level}, data_dir={data_dir}, "
            f"platform_fee={platform_fee}%, merchant_fee={merchant_fee}%"
        )

        return cls(
            log_level=log_level,
            data_dir=data_dir,
            default_platform_fee_percent=platform_fee,
            default_merchant_fee_percent=merchant_fee,
            default_shipping_cost=shipping_cost,
        )

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Ensured data directory exists: {self.data_dir}")

    def default_fee_config(self) -> FeeConfig:
        """Fee configuration used when a tenant has no overrides."""
        return resolve_fee_config(
            default_platform_percent=self.default_platform_fee_percent,
            default_merchant_percent=self.default_merchant_fee_percent,
        )


def configure_logging(settings: Settings) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
