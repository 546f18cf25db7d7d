from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from tsline.series import CategorySeries


Interval = tuple[float, float]

DEFAULT_TIME_FORMAT = "%b %d, %y"

_SECOND = 1000.0
_MINUTE = _SECOND * 60
_HOUR = _MINUTE * 60
_DAY = _HOUR * 24
_WEEK = _DAY * 7
_MONTH = _DAY * 30
_YEAR = _DAY * 365

_EPOCH = pd.Timestamp(0, tz="UTC")
_ONE_MS = pd.Timedelta(milliseconds=1)


@dataclass(frozen=True)
class TimeInterval:
    unit: str
    step: int
    duration: float


TIME_TICK_INTERVALS: tuple[TimeInterval, ...] = (
    TimeInterval("second", 1, _SECOND),
    TimeInterval("second", 5, 5 * _SECOND),
    TimeInterval("second", 15, 15 * _SECOND),
    TimeInterval("second", 30, 30 * _SECOND),
    TimeInterval("minute", 1, _MINUTE),
    TimeInterval("minute", 5, 5 * _MINUTE),
    TimeInterval("minute", 15, 15 * _MINUTE),
    TimeInterval("minute", 30, 30 * _MINUTE),
    TimeInterval("hour", 1, _HOUR),
    TimeInterval("hour", 3, 3 * _HOUR),
    TimeInterval("hour", 6, 6 * _HOUR),
    TimeInterval("hour", 12, 12 * _HOUR),
    TimeInterval("day", 1, _DAY),
    TimeInterval("day", 2, 2 * _DAY),
    TimeInterval("week", 1, _WEEK),
    TimeInterval("month", 1, _MONTH),
    TimeInterval("month", 3, 3 * _MONTH),
    TimeInterval("year", 1, _YEAR),
)

_FIXED_UNIT_MS = {"millisecond": 1.0, "second": _SECOND, "minute": _MINUTE, "hour": _HOUR}
_CALENDAR_FREQ = {"week": "W-SUN", "month": "MS", "year": "YS"}


def compute_domains(categories: Iterable[CategorySeries]) -> tuple[Interval, Interval]:
    """Return (x_domain, y_domain) over every finite coordinate.

    The y domain is always anchored at zero. Empty data yields [0, 0] for both axes.
    """
    xs: list[np.ndarray] = []
    ys: list[np.ndarray] = []
    for category in categories:
        xs.append(category.x[np.isfinite(category.x)])
        ys.append(category.y[np.isfinite(category.y)])
    all_x = np.concatenate(xs) if xs else np.empty(0, dtype=np.float64)
    all_y = np.concatenate(ys) if ys else np.empty(0, dtype=np.float64)

    x_domain = (float(np.min(all_x)), float(np.max(all_x))) if all_x.size else (0.0, 0.0)
    y_domain = (0.0, float(np.max(all_y)) if all_y.size else 0.0)
    return x_domain, y_domain


@dataclass(frozen=True)
class LinearScale:
    domain: Interval
    range: Interval
    clamp: bool = False

    def __call__(self, value: float | np.ndarray) -> float | np.ndarray:
        arr = np.asarray(value, dtype=np.float64)
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            out = np.where(np.isnan(arr), np.nan, (r0 + r1) / 2.0)
        else:
            t = (arr - d0) / (d1 - d0)
            if self.clamp:
                t = np.clip(t, 0.0, 1.0)
            out = r0 + t * (r1 - r0)
        return float(out) if out.ndim == 0 else out

    def invert(self, value: float | np.ndarray) -> float | np.ndarray:
        arr = np.asarray(value, dtype=np.float64)
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            out = np.where(np.isnan(arr), np.nan, (d0 + d1) / 2.0)
        else:
            t = (arr - r0) / (r1 - r0)
            if self.clamp:
                t = np.clip(t, 0.0, 1.0)
            out = d0 + t * (d1 - d0)
        return float(out) if out.ndim == 0 else out

    def ticks(self, count: int) -> np.ndarray:
        return generate_nice_ticks(self.domain[0], self.domain[1], count)

    def tick_labels(self, ticks: np.ndarray) -> list[str]:
        return format_ticks_for_axis(ticks)


@dataclass(frozen=True)
class TimeScale(LinearScale):
    """Linear scale over UTC epoch milliseconds with calendar-aligned ticks."""

    tick_format: str = DEFAULT_TIME_FORMAT

    def ticks(self, count: int) -> np.ndarray:
        return generate_time_ticks(self.domain[0], self.domain[1], count)

    def tick_labels(self, ticks: np.ndarray) -> list[str]:
        return format_time_ticks(ticks, self.tick_format)


def generate_nice_ticks(vmin: float, vmax: float, count: int) -> np.ndarray:
    """Round values (1, 2 or 5 times a power of ten) inside [vmin, vmax], about `count` of them."""
    if count <= 0 or not (np.isfinite(vmin) and np.isfinite(vmax)):
        return np.empty(0, dtype=np.float64)
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    reverse = vmax < vmin
    lo, hi = (vmax, vmin) if reverse else (vmin, vmax)
    step = tick_increment(lo, hi, count)
    if not np.isfinite(step) or step <= 0:
        return np.empty(0, dtype=np.float64)

    if step >= 1.0:
        i0 = int(np.ceil(lo / step))
        i1 = int(np.floor(hi / step))
        ticks = np.arange(i0, i1 + 1, dtype=np.float64) * step
    else:
        # Divide by the integer inverse so ticks like 0.3 come out exact.
        inv = float(np.round(1.0 / step))
        i0 = int(np.ceil(lo * inv))
        i1 = int(np.floor(hi * inv))
        ticks = np.arange(i0, i1 + 1, dtype=np.float64) / inv
    ticks[ticks == 0.0] = 0.0
    return ticks[::-1] if reverse else ticks


def tick_increment(lo: float, hi: float, count: int) -> float:
    return _nice_number((hi - lo) / max(count, 1))


def generate_time_ticks(start: float, stop: float, count: int) -> np.ndarray:
    if count <= 0 or not (np.isfinite(start) and np.isfinite(stop)):
        return np.empty(0, dtype=np.float64)
    if start == stop:
        return np.asarray([start], dtype=np.float64)

    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    unit, step = select_time_interval(lo, hi, count)
    ticks = _interval_ticks(unit, step, lo, hi)
    return ticks[::-1] if reverse else ticks


def select_time_interval(lo: float, hi: float, count: int) -> tuple[str, int]:
    """Pick the calendar interval whose duration is closest to the span divided by `count`."""
    target = abs(hi - lo) / max(count, 1)
    durations = [interval.duration for interval in TIME_TICK_INTERVALS]
    i = bisect_right(durations, target)
    if i == len(TIME_TICK_INTERVALS):
        years = tick_increment(lo / _YEAR, hi / _YEAR, count)
        return ("year", max(1, int(round(years))))
    if i == 0:
        millis = tick_increment(lo, hi, count)
        return ("millisecond", max(1, int(round(millis))))
    before = TIME_TICK_INTERVALS[i - 1]
    after = TIME_TICK_INTERVALS[i]
    chosen = before if target / before.duration < after.duration / target else after
    return (chosen.unit, chosen.step)


def format_time_ticks(ticks: np.ndarray, fmt: str = DEFAULT_TIME_FORMAT) -> list[str]:
    if ticks.size == 0:
        return []
    stamps = pd.to_datetime(np.asarray(ticks, dtype=np.float64), unit="ms", utc=True)
    return [str(label) for label in stamps.strftime(fmt)]


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    magnitude = abs(value)
    if magnitude and (magnitude >= 1e15 or magnitude < 1e-6 or (step is not None and abs(step) < 1e-4)):
        return f"{value:.4e}"

    decimals = _decimals_from_step(step) if step is not None else 6
    exact = Decimal(str(value))
    try:
        text = format(exact.quantize(Decimal(1).scaleb(-decimals)), "f")
    except InvalidOperation:
        text = format(exact, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ticks_for_axis(ticks: np.ndarray | Sequence[float]) -> list[str]:
    ticks = np.asarray(ticks, dtype=np.float64)
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _interval_ticks(unit: str, step: int, lo: float, hi: float) -> np.ndarray:
    if unit in _FIXED_UNIT_MS:
        # UTC second/minute/hour boundaries are multiples of the unit since the epoch.
        step_ms = _FIXED_UNIT_MS[unit] * step
        first = np.ceil(lo / step_ms) * step_ms
        ticks = np.arange(first, hi + step_ms * 0.5, step_ms, dtype=np.float64)
        return ticks[ticks <= hi]

    start = pd.Timestamp(lo, unit="ms", tz="UTC").floor("D")
    end = pd.Timestamp(hi, unit="ms", tz="UTC")
    if unit == "day":
        stamps = pd.date_range(start=start, end=end, freq="D")
        stamps = stamps[(stamps.day - 1) % step == 0]
    else:
        stamps = pd.date_range(start=start, end=end, freq=_CALENDAR_FREQ[unit])
        if unit == "month":
            stamps = stamps[(stamps.month - 1) % step == 0]
        elif unit == "year":
            stamps = stamps[stamps.year % step == 0]
    ticks = ((stamps - _EPOCH) / _ONE_MS).to_numpy(dtype=np.float64)
    return ticks[(ticks >= lo) & (ticks <= hi)]


def _nice_number(value: float) -> float:
    if not np.isfinite(value) or value <= 0:
        return float("nan")
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if frac >= np.sqrt(50.0):
        nice_frac = 10.0
    elif frac >= np.sqrt(10.0):
        nice_frac = 5.0
    elif frac >= np.sqrt(2.0):
        nice_frac = 2.0
    else:
        nice_frac = 1.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
