"""Data ingestion module for the program pricing engine.

This module handles:
- Reading product catalogs from API records or export files
- Validating schemas and pricing inputs
- Normalizing catalogs into ProductCost entities
"""

from program_pricing.ingest.loaders import (
    catalog_from_records,
    load_catalog_products,
    read_catalog_export,
)
from program_pricing.ingest.normalizers import (
    apply_column_mapping,
    catalog_to_products,
    normalize_catalog,
)
from program_pricing.ingest.validators import (
    ValidationResult,
    validate_catalog_schema,
    validate_pricing_input,
    validate_tier_fee_schema,
)

__all__ = [
    # Loaders
    "catalog_from_records",
    "read_catalog_export",
    "load_catalog_products",
    # Validators
    "ValidationResult",
    "validate_catalog_schema",
    "validate_tier_fee_schema",
    "validate_pricing_input",
    # Normalizers
    "apply_column_mapping",
    "normalize_catalog",
    "catalog_to_products",
]
