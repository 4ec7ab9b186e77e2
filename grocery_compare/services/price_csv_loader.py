"""
CSV price sheet loader.
Turns an uploaded price sheet into raw price documents for PriceUpdateService.
"""

from io import StringIO
from typing import Any, Dict, List, Tuple

import pandas as pd

MAX_ROWS = 10000

# Header spellings accepted per column (compared lower-cased and stripped)
COLUMN_ALIASES = {
    "store_id": ["store_id", "store id", "storeid", "store"],
    "product_name": ["product_name", "product name", "product", "name"],
    "price": ["price", "current price"],
    "is_on_sale": ["is_on_sale", "on sale", "on_sale", "sale"],
}
REQUIRED_COLUMNS = ["store_id", "product_name", "price"]

TRUE_VALUES = {"true", "yes", "y", "1"}
FALSE_VALUES = {"false", "no", "n", "0", ""}


class PriceSheetError(ValueError):
    """The sheet as a whole cannot be read"""


def decode_upload(content: bytes) -> str:
    """UTF-8 with a latin-1 fallback"""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def _normalise_columns(df: pd.DataFrame) -> pd.DataFrame:
    column_mapping = {}
    for col in df.columns:
        col_lower = str(col).strip().lower()
        for target, aliases in COLUMN_ALIASES.items():
            if col_lower in aliases:
                column_mapping[col] = target
                break
    return df.rename(columns=column_mapping)


def _parse_sale_flag(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    # Left as-is so the record mapper reports it
    return value


def load_price_sheet(content: str) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]], int, int]:
    """
    Parse CSV text into price documents.

    Returns:
        (documents, row errors, total rows, skipped empty rows)

    Raises:
        PriceSheetError: unreadable CSV, too many rows or missing columns
    """
    try:
        df = pd.read_csv(StringIO(content), dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise PriceSheetError(f"Could not parse CSV: {str(e)}") from e

    if len(df) > MAX_ROWS:
        raise PriceSheetError(f"CSV contains {len(df)} rows. Maximum allowed is {MAX_ROWS:,} rows.")

    df = _normalise_columns(df)
    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_columns:
        raise PriceSheetError(f"Missing required columns: {', '.join(missing_columns)}")

    columns = REQUIRED_COLUMNS + (["is_on_sale"] if "is_on_sale" in df.columns else [])
    for col in columns:
        df[col] = df[col].astype(str).str.strip()

    documents = []
    errors = []
    skipped_count = 0

    for idx, row in df.iterrows():
        if all(row[col] == "" for col in columns):
            skipped_count += 1
            continue

        missing_fields = [col for col in REQUIRED_COLUMNS if not row[col]]
        if missing_fields:
            errors.append({
                "row": idx + 2,  # +2 for header and 0-indexing
                "error": f"Missing required fields: {', '.join(missing_fields)}",
                "data": {col: row[col] for col in columns},
            })
            continue

        document = {
            "store_id": row["store_id"],
            "product_name": row["product_name"],
            "price": row["price"],
        }
        if "is_on_sale" in columns:
            document["is_on_sale"] = _parse_sale_flag(row["is_on_sale"])
        documents.append(document)

    return documents, errors, len(df), skipped_count
