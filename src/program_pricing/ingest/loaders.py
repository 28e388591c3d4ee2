"""Product catalog sources.

Products arrive either as records from the products API or as a catalog
export (CSV or Excel). Both end up as a polars frame with identifier columns
kept as text, then go through normalize_catalog() and catalog_to_products().
"""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

import pandas as pd
import polars as pl

from program_pricing.ingest.normalizers import (
    DEFAULT_SHIPPING_COST,
    catalog_to_products,
    normalize_catalog,
)
from program_pricing.ingest.validators import validate_catalog_schema
from program_pricing.models import ProductCost

logger = logging.getLogger(__name__)

# SKUs such as "00123" must not be parsed as numbers
ID_COLUMN_NAMES = {"id", "productId", "Product ID", "sku", "SKU"}

EXPORT_FORMATS = {".csv": "csv", ".xlsx": "excel", ".xls": "excel"}


def catalog_from_records(records: Sequence[Mapping[str, object]]) -> pl.DataFrame:
    """Build a raw catalog frame from products API records.

    Args:
        records: Product dicts (``id``, ``name``, ``pharmacyWholesaleCost``,
            ``price``, ...). Numbers may mix ints and floats.

    Returns:
        Polars DataFrame, one row per record.
    """
    if not records:
        return pl.DataFrame()

    df = pl.from_dicts(list(records), infer_schema_length=None, strict=False)
    id_columns = [col for col in df.columns if col in ID_COLUMN_NAMES]
    if id_columns:
        df = df.with_columns(pl.col(id_columns).cast(pl.String))

    logger.info(f"Read {df.height} catalog records")
    return df


def read_catalog_export(
    source: BinaryIO | Path | str,
    filename: str | None = None,
    sheet_name: str | int = 0,
) -> pl.DataFrame:
    """Read a catalog export file.

    Args:
        source: Path or open binary file.
        filename: Name used to pick the format; required for open files.
        sheet_name: Excel sheet to read.

    Returns:
        Raw catalog DataFrame with identifier columns as text.

    Raises:
        ValueError: If the format is unsupported or the file cannot be parsed.
    """
    if filename is None:
        if not isinstance(source, (Path, str)):
            raise ValueError("filename must be provided for file-like objects")
        filename = Path(source).name

    export_format = EXPORT_FORMATS.get(Path(filename).suffix.lower())
    if export_format is None:
        raise ValueError(
            f"Unsupported catalog export: {filename}. Expected .csv, .xlsx or .xls"
        )

    try:
        if isinstance(source, (Path, str)):
            content = Path(source).read_bytes()
        else:
            content = source.read()
        if export_format == "excel":
            df = _read_excel_export(content, sheet_name)
        else:
            df = _read_csv_export(content)
    except Exception as e:
        logger.error(f"Failed to read catalog export {filename}: {e}")
        raise ValueError(f"Cannot parse catalog export {filename}: {e}") from e

    logger.info(f"Read {df.height} products from {filename}")
    return df


def _read_csv_export(content: bytes) -> pl.DataFrame:
    header = pl.read_csv(BytesIO(content), n_rows=0).columns
    return pl.read_csv(
        BytesIO(content),
        schema_overrides={col: pl.String for col in header if col in ID_COLUMN_NAMES},
        infer_schema_length=None,
    )


def _read_excel_export(content: bytes, sheet_name: str | int) -> pl.DataFrame:
    # pandas + openpyxl parse the workbook; polars takes it from there
    header = pd.read_excel(
        BytesIO(content), sheet_name=sheet_name, engine="openpyxl", nrows=0
    )
    pdf = pd.read_excel(
        BytesIO(content),
        sheet_name=sheet_name,
        engine="openpyxl",
        dtype={col: str for col in header.columns if col in ID_COLUMN_NAMES},
    )
    return pl.from_pandas(pdf)


def load_catalog_products(
    catalog: pl.DataFrame,
    default_shipping_cost: Decimal = DEFAULT_SHIPPING_COST,
) -> list[ProductCost]:
    """Normalize, validate and convert a raw catalog to products.

    Args:
        catalog: Frame from catalog_from_records() or read_catalog_export().
        default_shipping_cost: Shipping cost for products without one.

    Returns:
        One ProductCost per catalog row.

    Raises:
        ValueError: If the catalog lacks an identifier or a cost column.
    """
    normalized = normalize_catalog(catalog, default_shipping_cost)

    validation = validate_catalog_schema(normalized)
    if not validation.is_valid:
        raise ValueError(validation.message)
    for warning in validation.warnings:
        logger.warning(warning)

    return catalog_to_products(normalized)
