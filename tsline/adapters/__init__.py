from .normalize import DataMapping, normalize_csv, normalize_rows, parse_magnitudes, parse_rows, parse_timestamps

__all__ = [
    "DataMapping",
    "normalize_csv",
    "normalize_rows",
    "parse_magnitudes",
    "parse_rows",
    "parse_timestamps",
]
