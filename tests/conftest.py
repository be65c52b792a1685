from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest
import yaml

from ev_dashboard.io.read import rows_to_frame
from sample_data import CSV_HEADER, CSV_LINES, sample_row_list, sample_topology_dict


@pytest.fixture
def sample_rows() -> pd.DataFrame:
    return rows_to_frame(sample_row_list())


@pytest.fixture
def sample_topology() -> dict:
    return sample_topology_dict()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """A config file whose relative data paths point at small fixture files."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "rows.csv").write_text(
        "\n".join([CSV_HEADER, *CSV_LINES]) + "\n", encoding="utf-8"
    )
    (data_dir / "world.topo.json").write_text(json.dumps(sample_topology_dict()), encoding="utf-8")

    path = tmp_path / "configs" / "dashboard.yaml"
    path.parent.mkdir()
    path.write_text(
        yaml.safe_dump(
            {
                "data": {
                    "rows_path": "../data/rows.csv",
                    "geography_path": "../data/world.topo.json",
                },
                "outputs": {"export_figures": False},
            }
        ),
        encoding="utf-8",
    )
    return path
