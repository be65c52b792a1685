from __future__ import annotations

import math
from typing import Iterable

Point = tuple[float, float]


class CylindricalStereographic:
    """Cylindrical stereographic projection (Braun's when ``parallel`` is 0).

    ``fit_size`` scales and centers the projection so the given (lon, lat)
    positions fill a ``width`` x ``height`` extent; screen y grows downward.
    """

    def __init__(self, parallel: float = 45.0) -> None:
        self.cos_parallel = math.cos(math.radians(parallel))
        self.scale = 1.0
        self.translate = (0.0, 0.0)
        self.width: float | None = None
        self.height: float | None = None

    def raw(self, longitude: float, latitude: float) -> Point:
        lam = math.radians(longitude)
        phi = math.radians(latitude)
        return (lam * self.cos_parallel, (1 + self.cos_parallel) * math.tan(phi / 2))

    def __call__(self, longitude: float, latitude: float) -> Point:
        x, y = self.raw(longitude, latitude)
        tx, ty = self.translate
        return (tx + self.scale * x, ty - self.scale * y)

    def fit_size(
        self, width: float, height: float, points: Iterable[Point]
    ) -> CylindricalStereographic:
        projected = [self.raw(lon, lat) for lon, lat in points]
        self.width, self.height = width, height
        if not projected:
            self.scale = 1.0
            self.translate = (width / 2, height / 2)
            return self
        xs = [x for x, _ in projected]
        ys = [y for _, y in projected]
        x0, x1, y0, y1 = min(xs), max(xs), min(ys), max(ys)
        candidates: list[float] = []
        if x1 > x0:
            candidates.append(width / (x1 - x0))
        if y1 > y0:
            candidates.append(height / (y1 - y0))
        self.scale = min(candidates) if candidates else 1.0
        self.translate = (
            (width - self.scale * (x1 + x0)) / 2,
            (height + self.scale * (y1 + y0)) / 2,
        )
        return self

    def in_extent(self, point: Point) -> bool:
        if self.width is None or self.height is None:
            return True
        x, y = point
        return 0 <= x <= self.width and 0 <= y <= self.height
