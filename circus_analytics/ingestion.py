"""Excel ingestion/output helpers with Polars-first and openpyxl fallback."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import polars as pl

logger = logging.getLogger(__name__)


def _import_openpyxl() -> tuple[Any, Any]:
    try:
        from openpyxl import Workbook, load_workbook
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("openpyxl is required for Excel fallback I/O.") from exc
    return Workbook, load_workbook


def _normalize_headers(raw_headers: Sequence[Any]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for idx, value in enumerate(raw_headers):
        base = str(value).strip() if value not in (None, "") else f"column_{idx + 1}"
        count = seen.get(base, 0)
        name = base if count == 0 else f"{base}_{count + 1}"
        seen[base] = count + 1
        headers.append(name)
    return headers


def _select_sheet_name(sheet_names: Sequence[str], preferred_sheet: str | None, path: Path) -> str:
    if not sheet_names:
        raise ValueError(f"No sheets found in {path}")
    if preferred_sheet is None:
        return sheet_names[0]
    if preferred_sheet in sheet_names:
        return preferred_sheet
    logger.warning("Sheet %r not found in %s, using %r", preferred_sheet, path, sheet_names[0])
    return sheet_names[0]


def _read_excel_polars(path: Path, **kwargs: Any) -> Any:
    """Use larger schema sampling when supported to avoid dtype inference warnings."""
    try:
        return pl.read_excel(path, infer_schema_length=10000, **kwargs)  # type: ignore[arg-type]
    except TypeError:
        return pl.read_excel(path, **kwargs)  # type: ignore[arg-type]


def _read_with_polars(path: Path, sheet_name: str | None) -> pl.DataFrame:
    if not hasattr(pl, "read_excel"):
        raise RuntimeError("polars.read_excel is not available in this environment.")
    if sheet_name is None:
        return _read_excel_polars(path, sheet_id=1)
    return _read_excel_polars(path, sheet_name=sheet_name)


def _read_with_openpyxl(path: Path, sheet_name: str | None) -> list[dict[str, Any]]:
    _, load_workbook = _import_openpyxl()
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        target = _select_sheet_name(list(workbook.sheetnames), sheet_name, path)
        worksheet = workbook[target]
        row_iter = worksheet.iter_rows(values_only=True)
        header_row = next(row_iter, None)
        if header_row is None:
            return []

        headers = _normalize_headers(header_row)
        records: list[dict[str, Any]] = []
        for values in row_iter:
            if values is None or all(value is None for value in values):
                continue
            row_data: dict[str, Any] = {}
            for idx, name in enumerate(headers):
                value = values[idx] if idx < len(values) else None
                # blank cells are absent keys, as in a JSON sheet export
                if value is not None:
                    row_data[name] = value
            records.append(row_data)
        return records
    finally:
        workbook.close()


def read_sheet_rows(path: str | Path, sheet_name: str | None = None) -> List[Dict[str, Any]]:
    """Decode one worksheet into row dicts keyed by header; ``None`` picks the first sheet."""
    excel_path = Path(path)
    if not excel_path.exists():
        raise FileNotFoundError(f"Input Excel file not found: {excel_path}")

    try:
        frame = _read_with_polars(excel_path, sheet_name)
    except Exception as exc:
        logger.debug("polars could not read %s (%s); falling back to openpyxl", excel_path, exc)
        return _read_with_openpyxl(excel_path, sheet_name)

    if isinstance(frame, dict):
        frame = next(iter(frame.values()), pl.DataFrame())
    return [
        {key: value for key, value in record.items() if value is not None}
        for record in frame.to_dicts()
    ]


def _excel_cell_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (int, bool, str)):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return value
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _write_with_polars(path: Path, sheets: Dict[str, pl.DataFrame]) -> bool:
    if not sheets:
        return False

    first_df = next(iter(sheets.values()))
    if not hasattr(first_df, "write_excel"):
        return False

    try:
        import xlsxwriter
    except ImportError:
        return False

    try:
        with xlsxwriter.Workbook(str(path)) as workbook:
            for sheet_name, frame in sheets.items():
                frame.write_excel(workbook=workbook, worksheet=str(sheet_name)[:31])
        return True
    except Exception as exc:
        logger.debug("polars could not write %s (%s); falling back to openpyxl", path, exc)
        return False


def _write_with_openpyxl(path: Path, sheets: Dict[str, pl.DataFrame]) -> None:
    Workbook, _ = _import_openpyxl()
    workbook = Workbook()
    default_sheet = workbook.active
    workbook.remove(default_sheet)

    for sheet_name, frame in sheets.items():
        worksheet = workbook.create_sheet(title=str(sheet_name)[:31])
        worksheet.append(frame.columns)
        for row in frame.iter_rows(named=False):
            worksheet.append([_excel_cell_value(value) for value in row])

    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)


def write_output_excel(path: str | Path, sheets: Dict[str, pl.DataFrame]) -> None:
    """Write output Excel with Polars-first and openpyxl fallback."""
    excel_path = Path(path)
    excel_path.parent.mkdir(parents=True, exist_ok=True)

    if _write_with_polars(excel_path, sheets):
        return
    _write_with_openpyxl(excel_path, sheets)
