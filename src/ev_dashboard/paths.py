from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    figures: Path
    payloads: Path

    @property
    def dashboard(self) -> Path:
        return self.root / "dashboard.html"


def build_output_paths(out_dir: Path) -> OutputPaths:
    paths = OutputPaths(
        root=out_dir,
        figures=out_dir / "figures",
        payloads=out_dir / "payloads",
    )
    for path in (paths.root, paths.figures, paths.payloads):
        path.mkdir(parents=True, exist_ok=True)
    return paths
