"""
SpeakerCalc Compute Engine

Core computation library for loudspeaker enclosure sizing and
panel cut-sheet generation.

All math is deterministic; no AI in the loop for numerical calculations.
"""

from engine.errors import EnclosureDesignError, MissingInputError, InfeasibleDesignError, NonPositiveGeometryError
from engine.enclosure import (
    DriverParameters,
    DriverCutout,
    EnclosureDesign,
    EnclosureTopology,
    PanelDimensions,
    PortedResult,
    SealedResult,
    calculate_dimensions,
    calculate_enclosure,
    calculate_ported,
    calculate_sealed,
    design_enclosure,
    get_enclosure_type,
    list_enclosure_types,
    summarize,
)
from engine.inputs import parse_driver_inputs, resolve_layout_inputs
from engine.layout import generate_layout, layout_from_dimensions, panel_outlines, cutout_warnings, preview_geometry

__version__ = "0.1.0"
