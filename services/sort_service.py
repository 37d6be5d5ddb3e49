import logging
import math
import re
import warnings
from datetime import datetime
from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence

import pandas as pd
from pandas.errors import OutOfBoundsDatetime

from models.table_model import Column, Row, SemanticKind, SortDirection, SortState
from services import value_normalizer as vn

logger = logging.getLogger(__name__)

Comparator = Callable[[Row, Row], int]

_DURATION = re.compile(
    r"(\d+(?:\.\d+)?)\s*(years?|yrs?|y|months?|mos?|mo|weeks?|w|days?|d|hours?|hrs?|h|"
    r"minutes?|mins?|m|seconds?|secs?|s)\b"
)
_LOCAL_DATE = re.compile(
    r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})(?:\s+(\d{1,2}):(\d{2})(?::(\d{2}))?\s*(AM|PM))?\s*$",
    re.IGNORECASE,
)
_NUMERIC_NOISE = re.compile(r"[, ]+")
_PURE_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_RELATIVE_DATE_WORDS = frozenset(("now", "today", "tomorrow", "yesterday"))

_DAY = 24 * 3600


class SortServiceError(Exception):
    pass


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def parse_duration_seconds(text: str) -> Optional[float]:
    m = _DURATION.search((text or "").strip().lower())
    if not m:
        return None
    qty = float(m.group(1))
    unit = m.group(2)
    if unit.startswith("y"):
        return qty * 365 * _DAY
    if unit.startswith("mo"):
        return qty * 30 * _DAY
    if unit.startswith("w"):
        return qty * 7 * _DAY
    if unit.startswith("d"):
        return qty * _DAY
    if unit.startswith("h"):
        return qty * 3600
    if unit.startswith("m"):
        return qty * 60
    return qty


def parse_date_millis(text: str) -> Optional[float]:
    t = (text or "").strip()
    if not t:
        return None

    m = _LOCAL_DATE.match(t)
    if m:
        month, day, year, hh, mi, ss, ampm = m.groups()
        hour = int(hh or 0)
        if ampm:
            if ampm.upper() == "AM" and hour == 12:
                hour = 0
            elif ampm.upper() == "PM" and hour != 12:
                hour += 12
        try:
            dt = datetime(int(year), int(month), int(day), hour, int(mi or 0), int(ss or 0))
        except ValueError:
            return None
        return _to_millis(dt)

    # Un número suelto no es una fecha
    if _PURE_NUMBER.match(_NUMERIC_NOISE.sub("", t)):
        return None
    # "now"/"today" dependen del reloj: no son comparables entre llamadas
    if t.lower() in _RELATIVE_DATE_WORDS:
        return None

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            ts = pd.to_datetime(t, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return _to_millis(ts)


def _to_millis(value) -> Optional[float]:
    # timestamp() no pasa por nanosegundos: sirve también fuera de 1677-2262
    try:
        return pd.Timestamp(value).timestamp() * 1000
    except (ValueError, OverflowError, OutOfBoundsDatetime):
        return None


def parse_numeric(text: str) -> Optional[float]:
    cleaned = _NUMERIC_NOISE.sub("", text or "")
    if not cleaned:
        return None
    try:
        n = float(cleaned)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def _compare_parsed(parse, a: str, b: str) -> int:
    pa = parse(a)
    pb = parse(b)
    if pa is None or pb is None:
        return 0
    return _sign(pa - pb)


def compare_cells(column: Column, a: str, b: str) -> int:
    """Comparación ascendente en cascada de dos celdas recortadas."""
    kind = column.semantic_kind

    if kind == SemanticKind.STATUS:
        diff = vn.status_rank(a) - vn.status_rank(b)
        if diff:
            return _sign(diff)

    if kind == SemanticKind.BOOLEAN:
        ba = vn.parse_boolean(a)
        bb = vn.parse_boolean(b)
        if ba is not None and bb is not None:
            # true antes que false
            return int(bb) - int(ba)

    for parse in (parse_duration_seconds, parse_date_millis, parse_numeric):
        result = _compare_parsed(parse, a, b)
        if result:
            return result

    if kind == SemanticKind.CHIPS:
        ta = vn.first_token(a).lower()
        tb = vn.first_token(b).lower()
        if ta != tb:
            return -1 if ta < tb else 1

    la = a.lower()
    lb = b.lower()
    if la != lb:
        return -1 if la < lb else 1
    if a != b:
        return -1 if a < b else 1
    return 0


def build_comparator(column: Column, direction: SortDirection) -> Comparator:
    if direction == SortDirection.ASCENDING:
        mul = 1
    elif direction == SortDirection.DESCENDING:
        mul = -1
    else:
        raise SortServiceError(f"Dirección de orden inválida: {direction}")

    header = column.raw_header

    def compare(row_a: Row, row_b: Row) -> int:
        a = (row_a.get(header) or "").strip()
        b = (row_b.get(header) or "").strip()
        return compare_cells(column, a, b) * mul

    return compare


def sort_rows(columns: Sequence[Column], rows: List[Row], sort_state: SortState) -> List[Row]:
    if not sort_state.is_active:
        return list(rows)
    column = next((c for c in columns if c.raw_header == sort_state.by), None)
    if column is None:
        logger.debug("Columna de orden '%s' no seleccionada, se omite", sort_state.by)
        return list(rows)
    comparator = build_comparator(column, sort_state.direction)
    return sorted(rows, key=cmp_to_key(comparator))
