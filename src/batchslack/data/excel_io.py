from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime
from pathlib import Path

import pandas as pd

# Legacy date fields use these values for "no date".
_EMPTY_DATES = {date(1, 1, 1), date(1899, 12, 30), date(1900, 1, 1)}

_TRUE_TOKENS = {"1", "true", "t", ".t.", "y", "yes", "x", "si", "sí"}
_DIGITS_RE = re.compile(r"^-?\d+$")


def read_table(path: str | Path) -> pd.DataFrame:
    """Read a CSV or Excel (.xlsx/.xlsm) export into a DataFrame with normalized column names.

    Text columns are read as strings so fixed-width legacy values keep their
    padding (process ids like "01 " must not be trimmed or turned into ints).
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix in {".xlsx", ".xlsm"}:
        df = pd.read_excel(p, dtype=str, keep_default_na=False, engine="openpyxl")
    elif suffix == ".csv":
        df = pd.read_csv(p, dtype=str, keep_default_na=False)
    else:
        raise ValueError(f"unsupported table format: {p.name!r}")
    return normalize_columns(df)


def normalize_col_name(name: str) -> str:
    """Normalize export column names to an ASCII snake_case token.

    Handles accents, non-breaking spaces, tabs and punctuation.
    """

    s = str(name or "").strip().lower()
    s = unicodedata.normalize("NFKD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = s.replace("\u00a0", " ")
    s = re.sub(r"[\s\t]+", " ", s)
    # keep alnum, underscore and spaces, turn the rest into spaces
    s = re.sub(r"[^a-z0-9_ ]+", " ", s)
    s = re.sub(r"\s+", "_", s).strip("_")
    return s


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [normalize_col_name(c) for c in df.columns]
    return df


def require_columns(df: pd.DataFrame, columns: list[str], *, table: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{table}: missing columns {missing}")


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def as_text(value) -> str:
    """Raw text value; None/NaN become ''. Padding is preserved."""
    if _is_missing(value):
        return ""
    return str(value)


def coerce_bool(value) -> bool:
    """Coerce legacy logical fields (FIN, ARR, ...) to bool.

    Unrecognized values are False.
    """
    if isinstance(value, bool):
        return value
    if _is_missing(value):
        return False
    if isinstance(value, (int, float)):
        return value != 0
    s = str(value).strip().lower()
    if s in _TRUE_TOKENS:
        return True
    try:
        return float(s) != 0
    except ValueError:
        return False


def coerce_float(value) -> float | None:
    """Coerce numeric representations to float.

    Returns None when value is empty/NaN or not a number.
    Accepts numbers and strings (handles ',' as decimal separator).
    """
    if _is_missing(value):
        return None

    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)

    s = str(value).strip()
    if not s or s.lower() == "nan":
        return None

    # 1.234,56 -> 1234.56
    if "," in s and "." in s:
        s = s.replace(".", "").replace(",", ".")
    elif "," in s:
        s = s.replace(",", ".")

    try:
        return float(s)
    except ValueError:
        return None


def parse_int_strict(value, *, field: str) -> int:
    """Parse an integer value.

    Accepts ints, floats like 12.0 and digit-only strings.
    Raises ValueError otherwise.
    """
    if _is_missing(value):
        raise ValueError(f"{field} is empty")

    if isinstance(value, bool):
        raise ValueError(f"{field} is not an integer: {value!r}")

    if isinstance(value, int):
        return int(value)

    if isinstance(value, float):
        if float(value).is_integer():
            return int(value)
        raise ValueError(f"{field} is not a whole number: {value!r}")

    s = str(value).strip()
    if not s:
        raise ValueError(f"{field} is empty")
    if _DIGITS_RE.match(s):
        return int(s)
    f = coerce_float(s)
    if f is not None and f.is_integer():
        return int(f)

    raise ValueError(f"{field} is not an integer: {value!r}")


def coerce_date(value) -> date | None:
    """Coerce date representations to a date.

    Empty values and legacy empty-date sentinels give None; unparsable text
    raises ValueError.
    """
    if _is_missing(value):
        return None

    if isinstance(value, datetime):
        d = value.date()
    elif isinstance(value, date):
        d = value
    elif hasattr(value, "to_pydatetime"):
        # pandas Timestamp
        d = value.to_pydatetime().date()
    else:
        s = str(value).strip()
        if not s:
            return None
        d = _parse_date_text(s)

    if d in _EMPTY_DATES:
        return None
    return d


def _parse_date_text(s: str) -> date:
    # Accept YYYY-MM-DD and ISO datetimes
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        pass

    for fmt in ("%Y%m%d", "%d-%m-%Y", "%d/%m/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"invalid date: {s!r}")
