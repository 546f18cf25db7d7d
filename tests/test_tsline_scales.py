from __future__ import annotations

import math
import unittest

import numpy as np
import pandas as pd

from tsline import CategorySeries
from tsline.scales import (
    LinearScale,
    TimeScale,
    compute_domains,
    format_tick,
    format_ticks_for_axis,
    format_time_ticks,
    generate_nice_ticks,
    generate_time_ticks,
    select_time_interval,
)


def _ms(text: str) -> float:
    return float(pd.Timestamp(text, tz="UTC").value // 1_000_000)


def _category(name: str, xs: list[float], ys: list[float]) -> CategorySeries:
    x = np.asarray(xs, dtype=np.float64)
    y = np.asarray(ys, dtype=np.float64)
    return CategorySeries(name=name, x=x, y=y, mask=np.isfinite(x) & np.isfinite(y))


class DomainTests(unittest.TestCase):
    def test_domains_span_all_categories_and_anchor_y_at_zero(self) -> None:
        categories = [
            _category("A", [_ms("2021-01-01"), _ms("2021-01-02")], [10.0, 20.0]),
            _category("B", [_ms("2021-01-01")], [5.0]),
        ]
        x_domain, y_domain = compute_domains(categories)
        self.assertEqual(x_domain, (_ms("2021-01-01"), _ms("2021-01-02")))
        self.assertEqual(y_domain, (0.0, 20.0))

    def test_y_domain_lower_bound_is_zero_for_far_from_zero_data(self) -> None:
        _, y_domain = compute_domains([_category("A", [1.0, 2.0], [1000.0, 1001.0])])
        self.assertEqual(y_domain, (0.0, 1001.0))
        _, negative = compute_domains([_category("A", [1.0, 2.0], [-5.0, -10.0])])
        self.assertEqual(negative, (0.0, -5.0))

    def test_undefined_values_are_ignored(self) -> None:
        x_domain, y_domain = compute_domains([_category("A", [1.0, math.nan, 3.0], [math.nan, 4.0, 2.0])])
        self.assertEqual(x_domain, (1.0, 3.0))
        self.assertEqual(y_domain, (0.0, 4.0))

    def test_empty_data_falls_back_to_zero_domains(self) -> None:
        self.assertEqual(compute_domains([]), ((0.0, 0.0), (0.0, 0.0)))


class LinearScaleTests(unittest.TestCase):
    def test_maps_and_extrapolates_by_default(self) -> None:
        scale = LinearScale(domain=(0.0, 10.0), range=(0.0, 100.0))
        self.assertEqual(scale(5.0), 50.0)
        self.assertEqual(scale(20.0), 200.0)
        self.assertEqual(scale(-1.0), -10.0)

    def test_clamp_limits_output_to_range(self) -> None:
        scale = LinearScale(domain=(0.0, 10.0), range=(0.0, 100.0), clamp=True)
        self.assertEqual(scale(20.0), 100.0)
        self.assertEqual(scale(-1.0), 0.0)

    def test_inverted_range_maps_larger_values_higher_on_screen(self) -> None:
        scale = LinearScale(domain=(0.0, 20.0), range=(480.0, 0.0))
        self.assertEqual(scale(0.0), 480.0)
        self.assertEqual(scale(20.0), 0.0)
        self.assertLess(scale(15.0), scale(5.0))
        self.assertEqual(scale.invert(240.0), 10.0)

    def test_arrays_and_nan_pass_through(self) -> None:
        scale = LinearScale(domain=(0.0, 4.0), range=(0.0, 8.0))
        out = scale(np.asarray([0.0, math.nan, 4.0]))
        self.assertEqual(out[0], 0.0)
        self.assertTrue(math.isnan(out[1]))
        self.assertEqual(out[2], 8.0)

    def test_degenerate_domain_maps_to_range_midpoint(self) -> None:
        scale = LinearScale(domain=(3.0, 3.0), range=(0.0, 100.0))
        self.assertEqual(scale(3.0), 50.0)
        self.assertEqual(scale.ticks(5).tolist(), [3.0])


class TickTests(unittest.TestCase):
    def test_nice_ticks_use_round_steps_within_domain(self) -> None:
        self.assertEqual(generate_nice_ticks(0.0, 20.0, 10).tolist(), [float(v) for v in range(0, 21, 2)])
        self.assertEqual(generate_nice_ticks(0.0, 1.0, 5).tolist(), [0.0, 0.2, 0.4, 0.6, 0.8, 1.0])
        self.assertEqual(generate_nice_ticks(0.0, 95.0, 3).tolist(), [0.0, 50.0])

    def test_tick_count_is_advisory(self) -> None:
        ticks = generate_nice_ticks(0.0, 20.0, 4)
        self.assertEqual(ticks.tolist(), [0.0, 5.0, 10.0, 15.0, 20.0])

    def test_no_ticks_for_non_positive_count(self) -> None:
        self.assertEqual(generate_nice_ticks(0.0, 20.0, 0).size, 0)
        self.assertEqual(generate_time_ticks(0.0, 1e9, 0).size, 0)

    def test_reversed_domain_ticks_follow_domain_direction(self) -> None:
        self.assertEqual(generate_nice_ticks(0.0, -5.0, 5).tolist(), [0.0, -1.0, -2.0, -3.0, -4.0, -5.0])

    def test_numeric_labels_use_step_precision(self) -> None:
        self.assertEqual(format_ticks_for_axis(np.asarray([0.0, 0.5, 1.0])), ["0", "0.5", "1"])
        self.assertEqual(format_ticks_for_axis(np.asarray([0.0, 10.0, 20.0])), ["0", "10", "20"])

    def test_tick_labels_trim_fractional_zeros_and_switch_to_scientific(self) -> None:
        self.assertEqual(format_tick(30.0, step=10.0), "30")
        self.assertEqual(format_tick(2.5, step=0.5), "2.5")
        self.assertEqual(format_tick(-1e-12, step=1.0), "0")
        self.assertEqual(format_tick(2e15, step=1e15), "2.0000e+15")

    def test_time_interval_selection(self) -> None:
        self.assertEqual(select_time_interval(_ms("2021-01-01"), _ms("2021-01-02"), 8), ("hour", 3))
        self.assertEqual(select_time_interval(_ms("2021-01-01"), _ms("2021-01-31"), 4), ("week", 1))
        self.assertEqual(select_time_interval(_ms("2020-01-01"), _ms("2021-12-31"), 8), ("month", 3))
        self.assertEqual(select_time_interval(_ms("2000-01-01"), _ms("2020-01-01"), 4), ("year", 5))

    def test_time_ticks_align_to_calendar_boundaries(self) -> None:
        hourly = generate_time_ticks(_ms("2021-01-01"), _ms("2021-01-02"), 8)
        self.assertEqual(hourly.size, 9)
        self.assertEqual(hourly[1] - hourly[0], 3 * 3600 * 1000.0)

        quarterly = generate_time_ticks(_ms("2020-01-01"), _ms("2021-12-31"), 8)
        self.assertEqual(
            format_time_ticks(quarterly),
            [
                "Jan 01, 20",
                "Apr 01, 20",
                "Jul 01, 20",
                "Oct 01, 20",
                "Jan 01, 21",
                "Apr 01, 21",
                "Jul 01, 21",
                "Oct 01, 21",
            ],
        )

    def test_weekly_ticks_land_on_sundays(self) -> None:
        ticks = generate_time_ticks(_ms("2021-01-01"), _ms("2021-01-31"), 4)
        days = pd.to_datetime(ticks, unit="ms", utc=True)
        self.assertTrue(all(day.dayofweek == 6 for day in days))
        self.assertEqual(format_time_ticks(ticks)[0], "Jan 03, 21")

    def test_time_scale_labels_with_month_day_year(self) -> None:
        scale = TimeScale(domain=(_ms("2021-01-01"), _ms("2021-01-02")), range=(0.0, 600.0))
        labels = scale.tick_labels(scale.ticks(8))
        self.assertEqual(labels[0], "Jan 01, 21")
        self.assertEqual(labels[-1], "Jan 02, 21")
        self.assertEqual(scale(_ms("2021-01-01T12:00:00")), 300.0)


if __name__ == "__main__":
    unittest.main()
