"""Product catalog normalization.

This module handles:
- Column mapping from catalog export names to the standard schema
- Product cost fallback (wholesale cost, then list price)
- Default shipping cost for rows without one
- Clipping negative costs to zero
- Conversion of rows to ProductCost
"""

import logging
from decimal import Decimal

import polars as pl

from program_pricing.models import ProductCost
from program_pricing.money import clamp_non_negative

logger = logging.getLogger(__name__)

DEFAULT_SHIPPING_COST = Decimal("9.99")

# Maps raw catalog column names to standardized names
CATALOG_COLUMN_MAP = {
    "id": "Product ID",
    "productId": "Product ID",
    "sku": "Product ID",
    "SKU": "Product ID",
    "name": "Name",
    "Product Name": "Name",
    "pharmacyWholesaleCost": "Product Cost",
    "Wholesale Cost": "Product Cost",
    "shippingCost": "Shipping Cost",
    "telehealthCost": "Telehealth Cost",
    "consultCost": "Telehealth Cost",
    "Consult Cost": "Telehealth Cost",
}

COST_COLUMNS = ["Product Cost", "Shipping Cost", "Telehealth Cost"]


def apply_column_mapping(
    df: pl.DataFrame,
    column_map: dict[str, str],
) -> pl.DataFrame:
    """Rename columns according to a mapping.

    Only renames columns that exist, and never onto a column that is
    already present.

    Args:
        df: DataFrame to rename columns in.
        column_map: Mapping of old names to new names.

    Returns:
        DataFrame with renamed columns.
    """
    renames = {}
    for old_name, new_name in column_map.items():
        if (
            old_name in df.columns
            and new_name not in df.columns
            and new_name not in renames.values()
        ):
            renames[old_name] = new_name
            logger.debug(f"Mapping column: '{old_name}' -> '{new_name}'")

    if renames:
        df = df.rename(renames)
        logger.info(f"Renamed {len(renames)} columns")

    return df


def normalize_catalog(
    df: pl.DataFrame,
    default_shipping_cost: Decimal = DEFAULT_SHIPPING_COST,
) -> pl.DataFrame:
    """Normalize a product catalog to the standard schema.

    Product cost falls back to ``price`` where no wholesale cost is given.
    Missing shipping costs take the default, missing telehealth costs are
    zero, and negative costs are clipped to zero.

    Args:
        df: Raw catalog DataFrame.
        default_shipping_cost: Shipping cost for rows without one.

    Returns:
        Normalized catalog DataFrame.
    """
    logger.info(f"Normalizing catalog with {df.height} rows")

    df = apply_column_mapping(df, CATALOG_COLUMN_MAP)

    if "price" in df.columns:
        if "Product Cost" in df.columns:
            df = df.with_columns(
                pl.coalesce(
                    pl.col("Product Cost").cast(pl.Float64, strict=False),
                    pl.col("price").cast(pl.Float64, strict=False),
                ).alias("Product Cost")
            )
        else:
            df = df.with_columns(pl.col("price").alias("Product Cost"))
            logger.info("Using 'price' as 'Product Cost'")

    if "Shipping Cost" not in df.columns:
        df = df.with_columns(pl.lit(None, dtype=pl.Float64).alias("Shipping Cost"))
    if "Telehealth Cost" not in df.columns:
        df = df.with_columns(pl.lit(0.0).alias("Telehealth Cost"))

    df = df.with_columns(
        pl.col("Shipping Cost")
        .cast(pl.Float64, strict=False)
        .fill_null(float(default_shipping_cost))
    )

    present_costs = [col for col in COST_COLUMNS if col in df.columns]
    negative_count = df.select(
        pl.sum_horizontal(
            [(pl.col(col).cast(pl.Float64, strict=False) < 0).sum() for col in present_costs]
        )
    ).item()
    if negative_count:
        logger.warning(f"Clipping {negative_count} negative cost values to zero")

    df = df.with_columns(
        [
            pl.col(col).cast(pl.Float64, strict=False).clip(lower_bound=0.0)
            for col in present_costs
        ]
    )

    if "Product ID" in df.columns:
        df = df.with_columns(pl.col("Product ID").cast(pl.String))

    return df


def catalog_to_products(df: pl.DataFrame) -> list[ProductCost]:
    """Convert a normalized catalog to ProductCost entities.

    Null costs are treated as zero. Amounts are rounded to cents through
    their string form so float noise does not leak into Decimal.

    Args:
        df: Catalog after normalize_catalog().

    Returns:
        One ProductCost per row, in catalog order.
    """
    products = []
    for row in df.iter_rows(named=True):
        products.append(
            ProductCost(
                product_cost=_cents(row.get("Product Cost")),
                shipping_cost=_cents(row.get("Shipping Cost")),
                telehealth_cost=_cents(row.get("Telehealth Cost")),
                product_id=row.get("Product ID"),
                name=row.get("Name"),
            )
        )

    logger.info(f"Built {len(products)} products from catalog")
    return products


def _cents(value: object) -> Decimal:
    if isinstance(value, float):
        value = f"{value:.2f}"
    return clamp_non_negative(value)
