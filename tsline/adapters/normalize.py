from __future__ import annotations

from dataclasses import dataclass
import io
import logging
from typing import Any, Literal
import warnings

import numpy as np
import pandas as pd

from tsline.errors import ChartDataError
from tsline.series import CategorySeries


LOGGER = logging.getLogger(__name__)

SortMode = Literal["temporal", "lexical"]

# Leading numeric prefix, the same text a permissive float parser would consume.
_NUMERIC_PREFIX = r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
_EPOCH = pd.Timestamp(0, tz="UTC")
_ONE_MS = pd.Timedelta(milliseconds=1)


@dataclass(frozen=True)
class DataMapping:
    x: str
    y: str
    z: str

    def fields(self) -> tuple[tuple[str, str], ...]:
        return (("x", self.x), ("y", self.y), ("z", self.z))


def parse_rows(text: str) -> pd.DataFrame:
    if not text.strip():
        return pd.DataFrame()
    # With index_col=False pandas only warns when a row is wider than the header.
    with warnings.catch_warnings():
        warnings.simplefilter("error", pd.errors.ParserWarning)
        try:
            return pd.read_csv(
                io.StringIO(text),
                dtype=str,
                index_col=False,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except pd.errors.ParserWarning as exc:
            raise ChartDataError(f"malformed csv input: a row has more fields than the header ({exc})") from exc
        except pd.errors.ParserError as exc:
            raise ChartDataError(f"malformed csv input: {exc}") from exc


def normalize_csv(text: str, mapping: DataMapping, *, sort: SortMode = "temporal") -> list[CategorySeries]:
    return normalize_rows(parse_rows(text), mapping, sort=sort)


def normalize_rows(rows: Any, mapping: DataMapping, *, sort: SortMode = "temporal") -> list[CategorySeries]:
    frame = _resolve_frame(rows)
    if frame.columns.size == 0 and len(frame) == 0:
        return []
    _validate_mapping(frame, mapping)

    raw_x = frame[mapping.x].astype(str)
    raw_z = frame[mapping.z].astype(str)
    x = parse_timestamps(frame[mapping.x])
    y = parse_magnitudes(frame[mapping.y])

    order = _sort_order(raw_x, x, sort)
    x = x[order]
    y = y[order]
    z = raw_z.to_numpy()[order]

    mask = np.isfinite(x) & np.isfinite(y)
    dropped = int(mask.size - np.count_nonzero(mask))
    if dropped:
        LOGGER.debug("%d of %d rows have undefined points and will render as gaps", dropped, mask.size)

    categories: list[CategorySeries] = []
    for name in pd.unique(z):
        members = z == name
        categories.append(
            CategorySeries(
                name=str(name),
                x=x[members],
                y=y[members],
                mask=mask[members],
            )
        )
    return categories


def parse_timestamps(values: pd.Series) -> np.ndarray:
    """Parse date strings into UTC epoch milliseconds; unparseable values become NaN."""
    if values.empty:
        return np.empty(0, dtype=np.float64)
    if pd.api.types.is_numeric_dtype(values):
        return values.to_numpy(dtype=np.float64, na_value=np.nan)
    if pd.api.types.is_datetime64_any_dtype(values):
        parsed = pd.to_datetime(values, utc=True)
    else:
        parsed = pd.to_datetime(values.astype(str), errors="coerce", utc=True, format="mixed")
    millis = (parsed - _EPOCH) / _ONE_MS
    return millis.to_numpy(dtype=np.float64, na_value=np.nan)


def parse_magnitudes(values: pd.Series) -> np.ndarray:
    """Drop the one-character unit symbol, then read the leading number; failures become NaN."""
    if values.empty:
        return np.empty(0, dtype=np.float64)
    if pd.api.types.is_numeric_dtype(values):
        return values.to_numpy(dtype=np.float64, na_value=np.nan)
    prefix = values.astype(str).str.slice(1).str.extract(_NUMERIC_PREFIX, expand=False)
    return pd.to_numeric(prefix, errors="coerce").to_numpy(dtype=np.float64, na_value=np.nan)


def _resolve_frame(rows: Any) -> pd.DataFrame:
    if isinstance(rows, str):
        return parse_rows(rows)
    if isinstance(rows, pd.DataFrame):
        return rows.reset_index(drop=True)
    if isinstance(rows, list):
        return pd.DataFrame.from_records(rows)
    raise ChartDataError(f"unsupported rows input type: {type(rows)!r}")


def _validate_mapping(frame: pd.DataFrame, mapping: DataMapping) -> None:
    for axis, field_name in mapping.fields():
        if field_name not in frame.columns:
            available = ", ".join(str(c) for c in frame.columns)
            raise ChartDataError(f"{axis} field not found: {field_name!r} (available: {available})")
    for axis, field_name in mapping.fields():
        missing = frame[field_name].isna().to_numpy()
        if np.any(missing):
            row = int(np.flatnonzero(missing)[0])
            raise ChartDataError(f"row {row} is missing {axis} field {field_name!r}")


def _sort_order(raw_x: pd.Series, x: np.ndarray, sort: SortMode) -> np.ndarray:
    if sort == "temporal":
        # NaN sorts last under numpy's stable argsort.
        return np.argsort(x, kind="stable")
    if sort == "lexical":
        return np.argsort(raw_x.to_numpy(dtype=str), kind="stable")
    raise ChartDataError(f"unknown sort mode: {sort!r}")
