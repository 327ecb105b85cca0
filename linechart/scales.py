from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import logging
import math

import numpy as np

from linechart.errors import DegenerateRange, InvalidRange, LabelFormatError, PlotDataError


LOGGER = logging.getLogger(__name__)

NICE_MULTIPLIERS = (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 1.0)
_MULTIPLIER_TOLERANCE = 1e-9
_MAX_EXTRA_DIGITS = 3


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class AxisScale:
    """Tick layout for one axis.

    `scale_min`/`scale_max` may extend past the data so that every tick lands
    on a round value; `scale_max - scale_min == step * (tick_count - 1)`.
    """

    data_min: float
    data_max: float
    scale_min: float
    scale_max: float
    step: float
    tick_count: int
    fraction_digits: int

    @property
    def crosses_zero(self) -> bool:
        return self.scale_min < 0.0 < self.scale_max

    def axis_position(self) -> float:
        """Where the perpendicular axis line crosses this axis."""
        return 0.0 if self.crosses_zero else self.scale_min

    def tick_values(self) -> np.ndarray:
        ticks = self.scale_min + np.arange(self.tick_count, dtype=np.float64) * self.step
        # Drift like -4.44e-16 must read as an exact zero tick.
        ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=self.step * 1e-9)] = 0.0
        return ticks

    def span(self) -> float:
        return self.scale_max - self.scale_min


def compute_scale(data_min: float, data_max: float, tick_count: int) -> AxisScale:
    if tick_count < 2:
        raise InvalidRange(f"tick_count must be >= 2, got {tick_count}")
    dmin = float(data_min)
    dmax = float(data_max)
    if not (math.isfinite(dmin) and math.isfinite(dmax)):
        raise DegenerateRange(f"data extent must be finite, got [{dmin}, {dmax}]")
    if dmax < dmin:
        raise InvalidRange(f"data_max must be >= data_min, got [{dmin}, {dmax}]")
    if dmax == dmin:
        raise DegenerateRange(f"data extent has zero width at {dmin}")

    n_steps = tick_count - 1
    raw_step = (dmax - dmin) / n_steps
    if not math.isfinite(raw_step):
        raise DegenerateRange(f"data extent [{dmin}, {dmax}] overflows")
    exponent = math.ceil(math.log10(raw_step))
    multiplier = _smallest_multiplier(raw_step / _pow10(exponent))
    LOGGER.debug("raw step %g -> nice step %g", raw_step, _nice_value(multiplier, exponent))

    if dmin < 0.0 < dmax:
        scale_min, scale_max, step, label_step = _fit_zero_crossing(dmin, dmax, multiplier, exponent, n_steps)
    else:
        scale_min, scale_max, step, label_step = _fit_from_power(dmin, dmax, multiplier, exponent, n_steps)

    return AxisScale(
        data_min=dmin,
        data_max=dmax,
        scale_min=scale_min,
        scale_max=scale_max,
        step=step,
        tick_count=tick_count,
        fraction_digits=_fraction_digits(step, label_step),
    )


def compute_extent(x: np.ndarray, y: np.ndarray, mask: np.ndarray) -> DataLimits:
    vx = x[mask]
    vy = y[mask]
    if vx.size == 0:
        raise PlotDataError("series contains no finite points")
    return DataLimits(
        xmin=float(np.min(vx)),
        xmax=float(np.max(vx)),
        ymin=float(np.min(vy)),
        ymax=float(np.max(vy)),
    )


def format_tick(value: float, fraction_digits: int) -> str:
    """Format with at most `fraction_digits` decimals, trimming trailing zeros."""
    if fraction_digits < 0:
        raise LabelFormatError(f"fraction_digits must be >= 0, got {fraction_digits}")
    if not math.isfinite(value):
        raise LabelFormatError(f"cannot format non-finite tick value {value!r}")
    quant = Decimal("1").scaleb(-fraction_digits)
    try:
        q = Decimal(repr(float(value))).quantize(quant)
    except InvalidOperation as exc:
        raise LabelFormatError(f"cannot format tick value {value!r} with {fraction_digits} digits") from exc
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(scale: AxisScale) -> list[str | None]:
    """Labels for every tick; `None` where a value cannot be formatted."""
    labels: list[str | None] = []
    for value in scale.tick_values().tolist():
        try:
            labels.append(format_tick(value, scale.fraction_digits))
        except LabelFormatError as exc:
            LOGGER.warning("skipping tick label: %s", exc)
            labels.append(None)
    return labels


def _fit_zero_crossing(
    dmin: float,
    dmax: float,
    multiplier: float,
    exponent: int,
    n_steps: int,
) -> tuple[float, float, float, float]:
    nice = _nice_value(multiplier, exponent)
    scale_min, scale_max = _snap(dmin, dmax, nice)
    if n_steps == 1:
        # Two ticks cannot bracket the data and also sit on zero.
        return scale_min, scale_max, scale_max - scale_min, nice

    step = (scale_max - scale_min) / n_steps
    scale_min, scale_max = _snap(dmin, dmax, step)
    spans = int(round((scale_max - scale_min) / step))
    if spans <= n_steps:
        return scale_min, scale_min + n_steps * step, step, nice

    LOGGER.debug("refined step %g needs %d steps, searching nice steps from %g", step, spans, nice)
    while True:
        scale_min = math.floor(dmin / nice) * nice
        if scale_min + n_steps * nice >= dmax - nice * _MULTIPLIER_TOLERANCE:
            return scale_min, scale_min + n_steps * nice, nice, nice
        multiplier, exponent = _next_nice(multiplier, exponent)
        nice = _nice_value(multiplier, exponent)


def _fit_from_power(
    dmin: float,
    dmax: float,
    multiplier: float,
    exponent: int,
    n_steps: int,
) -> tuple[float, float, float, float]:
    power_of_ten = _pow10(exponent)
    scale_min = math.floor(dmin / power_of_ten) * power_of_ten
    step = _nice_value(multiplier, exponent)
    while scale_min + n_steps * step < dmax - step * _MULTIPLIER_TOLERANCE:
        multiplier, exponent = _next_nice(multiplier, exponent)
        step = _nice_value(multiplier, exponent)
        LOGGER.debug("range from %g does not cover %g, widening step to %g", scale_min, dmax, step)
    return scale_min, scale_min + n_steps * step, step, step

def _fraction_digits(step: float, label_step: float) -> int:
    digits = max(0, -math.floor(math.log10(label_step)))
    # A refined step such as 2.4 needs more places than its nice step did.
    exact = -Decimal(repr(step)).normalize().as_tuple().exponent
    return max(digits, min(exact, digits + _MAX_EXTRA_DIGITS))


def _snap(dmin: float, dmax: float, step: float) -> tuple[float, float]:
    return math.floor(dmin / step) * step, math.ceil(dmax / step) * step


def _smallest_multiplier(ratio: float) -> float:
    for multiplier in NICE_MULTIPLIERS:
        if multiplier >= ratio * (1.0 - _MULTIPLIER_TOLERANCE):
            return multiplier
    return NICE_MULTIPLIERS[-1]


def _next_nice(multiplier: float, exponent: int) -> tuple[float, int]:
    idx = NICE_MULTIPLIERS.index(multiplier)
    if idx + 1 < len(NICE_MULTIPLIERS):
        return NICE_MULTIPLIERS[idx + 1], exponent
    # 0.1 * 10**(e+1) equals 1.0 * 10**e, so continue from 0.2.
    return NICE_MULTIPLIERS[1], exponent + 1


def _nice_value(multiplier: float, exponent: int) -> float:
    return float(Decimal(repr(multiplier)).scaleb(exponent))


def _pow10(exponent: int) -> float:
    return float(Decimal(1).scaleb(exponent))
