from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Hashable, Sequence

E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)

MIN_ZOOM = 1.0
MAX_ZOOM = 8.0


def tick_increment(start: float, stop: float, count: int = 10) -> float:
    """Step between nice ticks; negative values encode ``1 / -step`` for sub-unit steps."""
    step = (stop - start) / count if count > 0 else 0.0
    if step <= 0 or not math.isfinite(step):
        return 0.0
    power = math.floor(math.log10(step))
    error = step / (10**power)
    if error >= E10:
        factor = 10
    elif error >= E5:
        factor = 5
    elif error >= E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        return float(factor * 10**power)
    return -(10 ** (-power)) / factor


def zero_based_domain(maximum: float) -> tuple[float, float]:
    if not math.isfinite(maximum) or maximum <= 0:
        return (0.0, 1.0)
    return (0.0, float(maximum))


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return r0
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def nice(self, count: int = 10) -> LinearScale:
        start, stop = self.domain
        if stop < start:
            start, stop = stop, start
        previous = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == previous:
                break
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            previous = step
        return replace(self, domain=(start, stop))

    def ticks(self, count: int = 10) -> list[float]:
        start, stop = sorted(self.domain)
        if start == stop:
            return [start]
        step = tick_increment(start, stop, count)
        if step > 0:
            first, last = math.ceil(start / step), math.floor(stop / step)
            return [index * step for index in range(first, last + 1)]
        if step < 0:
            inverse = -step
            first, last = math.ceil(start * inverse), math.floor(stop * inverse)
            return [index / inverse for index in range(first, last + 1)]
        return []


@dataclass(frozen=True)
class SqrtScale(LinearScale):
    def __call__(self, value: float) -> float:
        d0, d1 = (math.sqrt(max(bound, 0.0)) for bound in self.domain)
        r0, r1 = self.range
        if d1 == d0:
            return r1
        return r0 + (math.sqrt(max(value, 0.0)) - d0) / (d1 - d0) * (r1 - r0)


@dataclass(frozen=True)
class BandScale:
    """Discrete band mapping: one evenly spaced slot per domain value."""

    domain: tuple[Hashable, ...]
    range: tuple[float, float]
    padding_inner: float = 0.0
    padding_outer: float = 0.0
    align: float = 0.5

    @property
    def step(self) -> float:
        start, stop = sorted(self.range)
        count = len(self.domain)
        return (stop - start) / max(1.0, count - self.padding_inner + self.padding_outer * 2)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding_inner)

    def positions(self) -> dict[Hashable, float]:
        start, stop = sorted(self.range)
        count = len(self.domain)
        step = self.step
        start += (stop - start - step * (count - self.padding_inner)) * self.align
        values = [start + step * index for index in range(count)]
        if self.range[1] < self.range[0]:
            values.reverse()
        return dict(zip(self.domain, values))

    def __call__(self, value: Hashable) -> float | None:
        return self.positions().get(value)

    def center(self, value: Hashable) -> float | None:
        position = self(value)
        if position is None:
            return None
        return position + self.bandwidth / 2

    def with_range(self, new_range: tuple[float, float]) -> BandScale:
        return replace(self, range=new_range)


def band_scale(
    domain: Sequence[Hashable],
    range_: tuple[float, float],
    padding: float | None = None,
    *,
    padding_inner: float = 0.0,
    padding_outer: float = 0.0,
) -> BandScale:
    if padding is not None:
        padding_inner = padding_outer = padding
    return BandScale(
        domain=tuple(domain),
        range=range_,
        padding_inner=padding_inner,
        padding_outer=padding_outer,
    )


def point_scale(
    domain: Sequence[Hashable], range_: tuple[float, float], padding: float = 0.5
) -> BandScale:
    """A band scale whose bands collapse to points (zero bandwidth)."""
    return BandScale(domain=tuple(domain), range=range_, padding_inner=1.0, padding_outer=padding)


@dataclass(frozen=True)
class ZoomExtent:
    min_scale: float = MIN_ZOOM
    max_scale: float = MAX_ZOOM


@dataclass(frozen=True)
class ZoomTransform:
    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def clamped(
        cls,
        k: float,
        x: float = 0.0,
        y: float = 0.0,
        *,
        extent: ZoomExtent = ZoomExtent(),
        width: float | None = None,
    ) -> ZoomTransform:
        """Clamp the scale factor to ``extent`` and keep the view inside ``[0, width]``."""
        k = min(max(k, extent.min_scale), extent.max_scale)
        if width is not None:
            x = min(max(x, width * (1 - k)), 0.0)
        return cls(k=k, x=x, y=y)

    def apply_x(self, value: float) -> float:
        return value * self.k + self.x

    def rescale_band(self, scale: BandScale) -> BandScale:
        r0, r1 = scale.range
        return scale.with_range((self.apply_x(r0), self.apply_x(r1)))
