"""Pydantic models for SpeakerCalc API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from engine.enclosure import EnclosureTopology


# Form values arrive either as numbers or as the raw text the user typed
RawNumber = Optional[Union[float, str]]


# --- Driver / Enclosure ---

class DriverParams(BaseModel):
    """Thiele-Small parameters used for enclosure sizing."""
    fs: float = Field(..., gt=0, description="Resonance frequency (Hz)")
    qts: float = Field(..., gt=0, description="Total Q factor")
    vas: float = Field(..., gt=0, description="Equivalent compliance volume (liters)")


class PanelDimensionsModel(BaseModel):
    width_cm: float
    height_cm: float
    depth_cm: float


class CalculateEnclosureRequest(BaseModel):
    fs: RawNumber = None
    qts: RawNumber = None
    vas: RawNumber = None
    enclosure_type: EnclosureTopology = EnclosureTopology.SEALED


class CalculateEnclosureResponse(BaseModel):
    enclosure_type: EnclosureTopology
    driver: DriverParams
    result: dict
    dimensions: PanelDimensionsModel
    summary: dict[str, str]


class EnclosureTypeInfo(BaseModel):
    name: str
    description: str


class EnclosureTypeListResponse(BaseModel):
    enclosure_types: list[EnclosureTypeInfo]


# --- Layout ---

class LayoutRequest(BaseModel):
    """Box dimensions and driver size in cm. Blank fields use defaults."""
    width: RawNumber = None
    height: RawNumber = None
    depth: RawNumber = None
    driver_size: RawNumber = None


class LayoutResponse(BaseModel):
    dxf: str
    dimensions: PanelDimensionsModel
    driver_size_cm: float
    outlines: dict[str, list[float]] = Field(
        default_factory=dict,
        description="Panel bounding boxes in mm: [x_min, y_min, x_max, y_max]",
    )
    warnings: list[str] = []
    preview: dict = {}


# --- Parameter extraction ---

class ExtractParametersRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=20000)
    api_key: Optional[str] = Field(None, description="Per-request Anthropic API key")


class ExtractParametersResponse(BaseModel):
    fs: Optional[float] = None
    qts: Optional[float] = None
    vas: Optional[float] = None
    found: list[str] = []


# --- Saved calculations ---

class SaveCalculationRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    raw_text: str = Field("", max_length=20000)
    fs: RawNumber = None
    qts: RawNumber = None
    vas: RawNumber = None
    enclosure_type: EnclosureTopology = EnclosureTopology.SEALED


class CalculationRecord(BaseModel):
    id: int
    name: str
    raw_text: str
    fs: float
    qts: float
    vas: float
    enclosure_type: EnclosureTopology
    width: float
    height: float
    depth: float
    volume: float
    created_at: datetime


class CalculationSummary(BaseModel):
    id: int
    name: str
    created_at: datetime


class CalculationListResponse(BaseModel):
    calculations: list[CalculationSummary]
    total: int
