from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

DATA_DIR_ENV_VAR = "EV_DASHBOARD_DATA_DIR"


class ColumnsConfig(BaseModel):
    make: str = "Make"
    model: str = "Model"
    model_year: str = "Model Year"
    vehicle_type: str = "Electric Vehicle Type"
    cafv_eligibility: str = "Clean Alternative Fuel Vehicle (CAFV) Eligibility"
    electric_range: str = "Electric Range"
    latitude: str = "Latitude"
    longitude: str = "Longitude"


class DataConfig(BaseModel):
    rows_path: str = "data/Electric_Vehicle_Population_Data_Cleaned.csv"
    geography_path: str = "data/countries-50m.topo.json"
    geography_object: str = "countries"
    region_name: str = "United States of America"


class Margin(BaseModel):
    top: float = Field(default=20.0, ge=0)
    right: float = Field(default=20.0, ge=0)
    bottom: float = Field(default=40.0, ge=0)
    left: float = Field(default=80.0, ge=0)


class ChartDimensions(BaseModel):
    width: float = Field(default=900.0, gt=0)
    height: float = Field(default=450.0, gt=0)
    margin: Margin = Field(default_factory=Margin)

    @property
    def inner_width(self) -> float:
        return max(self.width - self.margin.left - self.margin.right, 1.0)

    @property
    def inner_height(self) -> float:
        return max(self.height - self.margin.top - self.margin.bottom, 1.0)


def _dimensions(
    width: float, height: float, top: float, right: float, bottom: float, left: float
) -> ChartDimensions:
    return ChartDimensions(
        width=width,
        height=height,
        margin=Margin(top=top, right=right, bottom=bottom, left=left),
    )


class ChartsConfig(BaseModel):
    bar: ChartDimensions = Field(default_factory=lambda: _dimensions(1000, 500, 10, 10, 80, 75))
    pie: ChartDimensions = Field(default_factory=lambda: _dimensions(600, 400, 0, 0, 0, 0))
    stacked: ChartDimensions = Field(
        default_factory=lambda: _dimensions(1000, 580, 20, 20, 40, 80)
    )
    line: ChartDimensions = Field(default_factory=lambda: _dimensions(900, 450, 20, 30, 50, 80))
    grouped: ChartDimensions = Field(
        default_factory=lambda: _dimensions(700, 550, 10, 20, 40, 80)
    )
    scatter: ChartDimensions = Field(
        default_factory=lambda: _dimensions(750, 540, 20, 20, 50, 100)
    )
    map: ChartDimensions = Field(default_factory=lambda: _dimensions(1000, 600, 0, 0, 0, 0))


class MapConfig(BaseModel):
    coordinate_precision: int = Field(default=2, ge=0, le=6)
    min_radius: float = Field(default=1.0, gt=0)
    max_radius: float = Field(default=8.0, gt=0)


class OutputsConfig(BaseModel):
    figures_format: Literal["png", "svg", "pdf"] = "png"
    export_figures: bool = True


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8050, ge=1, le=65535)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    charts: ChartsConfig = Field(default_factory=ChartsConfig)
    map: MapConfig = Field(default_factory=MapConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_data_path(path_value: str, base_dir: Path) -> str:
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    data_dir = os.getenv(DATA_DIR_ENV_VAR)
    if data_dir:
        return str((Path(data_dir) / candidate.name).resolve())
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.data.rows_path = _resolve_data_path(config.data.rows_path, base_dir)
    config.data.geography_path = _resolve_data_path(config.data.geography_path, base_dir)
    return config
