from __future__ import annotations


class ChartDataError(ValueError):
    pass


class ChartOptionsError(ValueError):
    pass


class ChartLayoutError(ValueError):
    pass
