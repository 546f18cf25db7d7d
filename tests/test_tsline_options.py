from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path
import tempfile
import unittest
import xml.etree.ElementTree as ET

from main import main
from tsline import ChartOptions, ChartOptionsError, DEFAULT_COLORS, load_options


SOURCE_STYLE = {
    "dataMapping": {"x": "date", "y": "value", "z": "cat"},
    "legend": {
        "enabled": True,
        "textSize": 14,
        "position": "topCenter",
        "padding": 10,
        "title": True,
        "legendName": "Stores",
    },
    "xAxis": {"ticksDensity": 100},
    "yAxis": {"ticksDensity": 20},
}

OPTIONS_TOML = """
[dataMapping]
x = "date"
y = "value"
z = "cat"

[legend]
enabled = true
title = true
legendName = "Stores"
"""


class ChartOptionsTests(unittest.TestCase):
    def test_from_dict_reads_camel_case_payload(self) -> None:
        options = ChartOptions.from_dict(SOURCE_STYLE)
        self.assertEqual(options.data_mapping.fields(), (("x", "date"), ("y", "value"), ("z", "cat")))
        self.assertTrue(options.legend.enabled)
        self.assertEqual(options.legend.text_size, 14.0)
        self.assertEqual(options.legend.position, "topCenter")
        self.assertEqual(options.legend.legend_name, "Stores")
        self.assertEqual(options.x_axis.ticks_density, 100.0)
        self.assertEqual(options.y_axis.ticks_density, 20.0)
        self.assertEqual(options.palette.colors, DEFAULT_COLORS)

    def test_defaults_apply_when_sections_are_omitted(self) -> None:
        options = ChartOptions.from_dict({"dataMapping": {"x": "t", "y": "v", "z": "k"}})
        self.assertFalse(options.legend.enabled)
        self.assertEqual(options.legend.position, "bottomCenter")
        self.assertEqual(options.x_axis.sort, "temporal")
        self.assertEqual(options.y_axis.ticks_density, 20.0)
        self.assertFalse(options.y_axis.gridlines)

    def test_custom_palette(self) -> None:
        payload = dict(SOURCE_STYLE, palette=["#111", "#222"])
        self.assertEqual(ChartOptions.from_dict(payload).palette.colors, ("#111", "#222"))
        with self.assertRaises(ChartOptionsError):
            ChartOptions.from_dict(dict(SOURCE_STYLE, palette=[]))
        with self.assertRaises(ChartOptionsError):
            ChartOptions.from_dict(dict(SOURCE_STYLE, palette="red"))

    def test_missing_mapping_field_is_rejected(self) -> None:
        with self.assertRaisesRegex(ChartOptionsError, "dataMapping.z"):
            ChartOptions.from_dict({"dataMapping": {"x": "date", "y": "value"}})
        with self.assertRaisesRegex(ChartOptionsError, "dataMapping must be an object"):
            ChartOptions.from_dict({})

    def test_invalid_values_are_rejected(self) -> None:
        bad_payloads = [
            dict(SOURCE_STYLE, legend={"position": "left"}),
            dict(SOURCE_STYLE, legend={"enabled": "yes"}),
            dict(SOURCE_STYLE, legend={"padding": -1}),
            dict(SOURCE_STYLE, xAxis={"ticksDensity": True}),
            dict(SOURCE_STYLE, xAxis={"sort": "random"}),
            dict(SOURCE_STYLE, yAxis={"ticksDensity": float("inf")}),
        ]
        for payload in bad_payloads:
            with self.subTest(payload=payload):
                with self.assertRaises(ChartOptionsError):
                    ChartOptions.from_dict(payload)

    def test_unknown_keys_are_logged_and_ignored(self) -> None:
        payload = dict(SOURCE_STYLE, legend={"enabled": True, "colour": "red"})
        with self.assertLogs("tsline.options", level="WARNING") as logs:
            options = ChartOptions.from_dict(payload)
        self.assertTrue(options.legend.enabled)
        self.assertIn("legend.colour", logs.output[0])


class LoadOptionsTests(unittest.TestCase):
    def test_loads_toml_and_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            toml_path = Path(tmp) / "chart.toml"
            toml_path.write_text(OPTIONS_TOML, encoding="utf-8")
            json_path = Path(tmp) / "chart.json"
            json_path.write_text(json.dumps(SOURCE_STYLE), encoding="utf-8")

            from_toml = load_options(toml_path)
            from_json = load_options(json_path)
        self.assertEqual(from_toml.legend.legend_name, "Stores")
        self.assertEqual(from_toml.legend.position, "bottomCenter")
        self.assertEqual(from_json, ChartOptions.from_dict(SOURCE_STYLE))

    def test_unsupported_suffix_is_rejected(self) -> None:
        with self.assertRaisesRegex(ChartOptionsError, "unsupported options file type"):
            load_options("chart.yaml")


class CliTests(unittest.TestCase):
    def _write_inputs(self, tmp: str, header: str) -> tuple[Path, Path]:
        csv_path = Path(tmp) / "sales.csv"
        csv_path.write_text(f"{header}\n2021-01-01,$10,A\n2021-01-02,$20,A\n2021-01-01,$5,B\n", encoding="utf-8")
        options_path = Path(tmp) / "chart.json"
        options_path.write_text(json.dumps(SOURCE_STYLE), encoding="utf-8")
        return csv_path, options_path

    def test_render_writes_svg(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            csv_path, options_path = self._write_inputs(tmp, "date,value,cat")
            out = io.StringIO()
            with contextlib.redirect_stdout(out):
                code = main(["render", str(csv_path), "--options", str(options_path), "--width", "800", "--height", "600"])
            self.assertEqual(code, 0)
            self.assertIn("(2 categories)", out.getvalue())
            root = ET.parse(csv_path.with_suffix(".svg")).getroot()
        self.assertEqual(root.get("width"), "800")
        self.assertEqual(root.get("class"), "tsline-chart")

    def test_render_requires_a_command(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main([])
        self.assertEqual(ctx.exception.code, 2)

    def test_render_reports_missing_field(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            csv_path, options_path = self._write_inputs(tmp, "day,value,cat")
            err = io.StringIO()
            with contextlib.redirect_stderr(err):
                code = main(["render", str(csv_path), "--options", str(options_path)])
            self.assertEqual(code, 2)
            self.assertIn("'date'", err.getvalue())
            self.assertFalse(csv_path.with_suffix(".svg").exists())


if __name__ == "__main__":
    unittest.main()
