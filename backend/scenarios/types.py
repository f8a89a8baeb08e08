from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from lod.ids import MAX_ZOOM
from lod.options import ClusterOptions
from lod.reducers import named_reducer, parse_reducer_spec


class ScenarioCenter(BaseModel):
    lat: float
    lon: float


class ScenarioDefaultView(BaseModel):
    center: ScenarioCenter
    zoom: float = Field(ge=0.0, le=24.0)


SourceType = Literal["geojson_points"]


class ScenarioSource(BaseModel):
    type: SourceType = "geojson_points"
    # Relative paths resolve against the directory holding scenario.yaml.
    path: str


class ScenarioClustering(BaseModel):
    """
    Pyramid options as written in YAML (camelCase keys).
    """

    extent: int = Field(default=512, gt=0)
    radius: float = Field(default=40.0, ge=0.0)
    minZoom: int = Field(default=0, ge=0, le=MAX_ZOOM)
    maxZoom: int = Field(default=16, ge=0, le=MAX_ZOOM)
    minPoints: int = Field(default=2, ge=1)
    nodeSize: int = Field(default=64, ge=1)
    generateId: bool = False
    # Optional built-in aggregation, e.g. "sum:population".
    reduce: str | None = None

    @field_validator("reduce")
    @classmethod
    def _check_reduce(cls, v: str | None) -> str | None:
        if v is not None:
            parse_reducer_spec(v)
        return v

    @model_validator(mode="after")
    def _check_zoom_bounds(self) -> "ScenarioClustering":
        if self.minZoom > self.maxZoom:
            raise ValueError(f"minZoom ({self.minZoom}) must be <= maxZoom ({self.maxZoom})")
        return self

    def to_options(self) -> ClusterOptions:
        kwargs = {}
        if self.reduce:
            kwargs["map"], kwargs["reduce"] = named_reducer(self.reduce)
        return ClusterOptions(
            extent=self.extent,
            radius=self.radius,
            min_zoom=self.minZoom,
            max_zoom=self.maxZoom,
            min_points=self.minPoints,
            node_size=self.nodeSize,
            generate_id=self.generateId,
            **kwargs,
        )


class ScenarioConfig(BaseModel):
    id: str
    title: str
    defaultView: ScenarioDefaultView
    enabled: bool = True
    source: ScenarioSource
    clustering: ScenarioClustering = Field(default_factory=ScenarioClustering)
