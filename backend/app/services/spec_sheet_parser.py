"""
Spec Sheet Parser
Reads the LIT technical data sheet workbook into product spec payloads

Workbook layout (one product line per worksheet):
- Row 1: headers (first 25 columns, A-Y)
- Column A: product name, column B: item code
- Every other non-empty cell becomes a spec named after its header and
  grouped under the upper-cased header

Author: TM3
Date: 2026-02-10
"""
import io
import logging
import re
from typing import Dict, List, Set

import pandas as pd

from app.domain.product import SpecGroup, SpecItem
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

MAX_COLUMNS = 25
SPEC_SHEET_BRAND = "LIT"

EXCLUDED_SHEET_NAMES = [
    re.compile(r"^table\s+of\s+content$", re.IGNORECASE),
    re.compile(r"^existing$", re.IGNORECASE),
    re.compile(r"^new_2026$", re.IGNORECASE),
    re.compile(r"^dimensional\s+drawing$", re.IGNORECASE),
    re.compile(r"^illuminance\s+level$", re.IGNORECASE),
]
EXCLUDED_CELL_TEXT = re.compile(r"back\s+to\s+table\s+of\s+content", re.IGNORECASE)


def cell_text(value) -> str:
    """Cell value as trimmed single-line text ("" for empty cells)"""
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return re.sub(r"[\r\n]+", " ", str(value)).strip()


def should_skip_sheet(name: str) -> bool:
    return any(pattern.match(name.strip()) for pattern in EXCLUDED_SHEET_NAMES)


def should_skip_cell(value: str) -> bool:
    return not value or bool(EXCLUDED_CELL_TEXT.search(value))


def _parse_sheet(sheet_name: str, frame: pd.DataFrame) -> List[dict]:
    rows = [[cell_text(v) for v in row[:MAX_COLUMNS]] for row in frame.itertuples(index=False, name=None)]
    header = rows[0]
    products = []

    for row in rows[1:]:
        if not any(row):
            continue

        product_name = row[0] if len(row) > 0 else ""
        item_code = row[1] if len(row) > 1 else ""
        if not product_name or not item_code:
            continue
        if should_skip_cell(product_name) or should_skip_cell(item_code):
            continue

        groups: Dict[str, SpecGroup] = {}
        for col_idx in range(2, min(len(row), MAX_COLUMNS)):
            value = row[col_idx]
            if should_skip_cell(value):
                continue
            header_name = header[col_idx] if col_idx < len(header) else ""
            if not header_name:
                continue

            spec_name = header_name.strip()
            group = groups.setdefault(spec_name.upper(), SpecGroup(specGroup=spec_name.upper()))
            if not any(s.name == spec_name for s in group.specs):
                group.specs.append(SpecItem(name=spec_name, value=value))

        products.append({
            "sheetTitle": sheet_name,
            "productName": product_name,
            "itemCode": item_code,
            "brand": SPEC_SHEET_BRAND,
            "technicalSpecs": [g.model_dump() for g in groups.values()],
        })

    return products


def parse_spec_workbook(content: bytes) -> dict:
    """
    Parse every product worksheet of the workbook

    Returns:
        {"isValid", "products", "errors", "skippedSheets"}; isValid is True
        when at least one product was found
    """
    errors: List[str] = []
    skipped: List[str] = []
    products: List[dict] = []

    try:
        sheets = pd.read_excel(
            io.BytesIO(content), sheet_name=None, header=None, dtype=object, engine="openpyxl"
        )
    except Exception as e:
        logger.warning(f"Spec workbook could not be read: {e}")
        return {"isValid": False, "products": [], "errors": [f"File parse error: {e}"], "skippedSheets": []}

    for sheet_name, frame in sheets.items():
        if should_skip_sheet(sheet_name):
            skipped.append(sheet_name)
            continue

        if len(frame.index) < 2:
            errors.append(f'Sheet "{sheet_name}" has fewer than 2 rows')
            skipped.append(sheet_name)
            continue

        try:
            products.extend(_parse_sheet(sheet_name, frame))
        except Exception as e:
            errors.append(f'Sheet "{sheet_name}" parse error: {e}')
            skipped.append(sheet_name)

    logger.info(f"Spec workbook parsed: {len(products)} products, {len(skipped)} sheets skipped")
    return {
        "isValid": len(products) > 0,
        "products": products,
        "errors": errors,
        "skippedSheets": skipped,
    }


def existing_item_codes(db) -> Set[str]:
    """Item codes already stored, so imports can skip known products"""
    codes = set()
    for product in ProductRepository(db).find_all():
        for code in (product.itemCode, product.litItemCode):
            if code:
                codes.add(code)
    return codes
