from __future__ import annotations

from typing import Iterable, Mapping

from matplotlib import colormaps
from matplotlib.colors import to_hex

from ev_dashboard.model import VehicleType

BAR_FILL = "#5E3FBE"
SCATTER_FILL = "#6200EE"
VEHICLE_TYPE_COLORS = {
    VehicleType.BEV.value: "#f5a067",
    VehicleType.PHEV.value: "#5E3FBE",
}
GROUP_PALETTE = ["#f5a067", "#5E3FBE", "#2a9d8f", "#e76f51", "#264653"]


def qualitative_palette(name: str = "tab20") -> list[str]:
    return [to_hex(color) for color in colormaps[name].colors]


class ColorTable:
    """Category to color memo: first-seen categories take the next palette slot.

    Once assigned, a category keeps its color for the life of the table.
    """

    def __init__(self, palette: Iterable[str], seed: Mapping[str, str] | None = None) -> None:
        self._palette = list(palette)
        if not self._palette:
            raise ValueError("ColorTable needs at least one palette color")
        self._assigned: dict[str, str] = dict(seed or {})

    def color_for(self, category: str) -> str:
        color = self._assigned.get(category)
        if color is None:
            color = self._palette[len(self._assigned) % len(self._palette)]
            self._assigned[category] = color
        return color

    def assigned(self) -> dict[str, str]:
        return dict(self._assigned)

    def __contains__(self, category: object) -> bool:
        return category in self._assigned

    def __len__(self) -> int:
        return len(self._assigned)


def vehicle_type_colors() -> ColorTable:
    return ColorTable(GROUP_PALETTE, seed=VEHICLE_TYPE_COLORS)


def eligibility_colors() -> ColorTable:
    return ColorTable(GROUP_PALETTE)


def make_colors() -> ColorTable:
    return ColorTable(qualitative_palette())
