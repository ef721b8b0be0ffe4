"""
Enclosure sizing from Thiele-Small parameters.

Sealed alignment (Small, "Closed-Box Loudspeaker Systems", JAES 1972):
    alpha = (Qtc / Qts)² - 1
    Vb    = Vas / alpha
    F3    = fs · √((Qtc / Qts)²)

Ported alignment uses a fixed-ratio rule of thumb, not a full vented-box
solver:
    Vb = 2.5 · Vas
    Fb = 0.8 · fs
    Lv = 23562.5 · Sv / (Fb² · Vb) - 0.732 · Dv    (cm, liters, Hz)

Panel dimensions follow the golden-ratio proportion 1 : 1.618 : 0.618 so no
two wall pairs share a standing-wave mode.

The constants below are part of the output contract; saved designs and
exported drawings depend on them staying exactly as they are.
"""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Callable, Dict, List, Union

import numpy as np

from engine.errors import InfeasibleDesignError, NonPositiveGeometryError
from engine.formatting import format_fixed, format_number, round_fixed


# Sealed
TARGET_QTC = 0.707  # Butterworth (maximally flat) alignment

# Ported
PORTED_VOLUME_RATIO = 2.5
PORTED_TUNING_RATIO = 0.8
PORT_DIAMETER_CM = 5
PORT_LENGTH_MIN_CM = 5
HELMHOLTZ_CONSTANT = 23562.5
PORT_END_CORRECTION = 0.732

# Golden-ratio panel proportions (width, height, depth)
GOLDEN_RATIOS = (1, 1.618, 0.618)


class EnclosureTopology(str, Enum):
    SEALED = "sealed"
    PORTED = "ported"


def _require_positive(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InfeasibleDesignError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InfeasibleDesignError(f"{name} must be a positive finite number, got {value}")
    return value


@dataclass(frozen=True)
class DriverParameters:
    """Thiele-Small parameters needed for enclosure sizing."""
    fs: float   # Resonance frequency (Hz)
    qts: float  # Total Q factor
    vas: float  # Equivalent compliance volume (liters)

    def __post_init__(self):
        for name in ('fs', 'qts', 'vas'):
            object.__setattr__(self, name, _require_positive(name, getattr(self, name)))

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class SealedResult:
    box_volume_liters: float
    cutoff_frequency_hz: float  # -3 dB point
    target_qtc: float = TARGET_QTC

    @property
    def topology(self) -> EnclosureTopology:
        return EnclosureTopology.SEALED

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class PortedResult:
    box_volume_liters: float
    tuning_frequency_hz: float
    port_diameter_cm: float = PORT_DIAMETER_CM
    port_length_cm: float = PORT_LENGTH_MIN_CM

    @property
    def topology(self) -> EnclosureTopology:
        return EnclosureTopology.PORTED

    def to_dict(self) -> Dict:
        return asdict(self)


EnclosureResult = Union[SealedResult, PortedResult]


@dataclass(frozen=True)
class PanelDimensions:
    """Outer box dimensions in cm, one decimal place."""
    width_cm: float
    height_cm: float
    depth_cm: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class DriverCutout:
    diameter_cm: float

    def __post_init__(self):
        object.__setattr__(self, 'diameter_cm', _require_positive('diameter_cm', self.diameter_cm))


@dataclass(frozen=True)
class EnclosureDesign:
    """A complete calculation: inputs, acoustic result and panel sizes."""
    driver: DriverParameters
    topology: EnclosureTopology
    result: EnclosureResult
    dimensions: PanelDimensions

    @property
    def box_volume_liters(self) -> float:
        return self.result.box_volume_liters

    def to_dict(self) -> Dict:
        return {
            'driver': self.driver.to_dict(),
            'enclosure_type': self.topology.value,
            'result': self.result.to_dict(),
            'dimensions': self.dimensions.to_dict(),
        }


def calculate_sealed(fs: float, qts: float, vas: float) -> SealedResult:
    """
    Size a sealed box for a Qtc of 0.707.

    Raises:
        InfeasibleDesignError: if Qts >= Qtc. The driver is already too
            lightly damped to reach the target alignment in any box.
            Also raised when the volume or F3 overflows.
    """
    params = DriverParameters(fs, qts, vas)
    qtc = TARGET_QTC

    try:
        alpha = (qtc / params.qts) ** 2 - 1
    except OverflowError:
        raise InfeasibleDesignError(f"Qts {params.qts} is too small to size a sealed box")
    if alpha <= 0:
        raise InfeasibleDesignError(
            f"Qts {params.qts} is at or above the target Qtc {qtc}; "
            f"no sealed box can reach this alignment"
        )

    vb = params.vas / alpha
    f3 = params.fs * math.sqrt((qtc / params.qts) ** 2)

    if not math.isfinite(vb) or vb <= 0:
        raise InfeasibleDesignError(f"Sealed box volume is not physical ({vb})")
    if not math.isfinite(f3):
        raise InfeasibleDesignError(f"Cutoff frequency is not finite for fs={params.fs}, Qts={params.qts}")

    return SealedResult(box_volume_liters=vb, cutoff_frequency_hz=f3, target_qtc=qtc)


def calculate_ported(fs: float, qts: float, vas: float) -> PortedResult:
    """
    Size a ported box with a single round port.

    Port lengths shorter than 5 cm are clamped to 5 cm. The tuning frequency
    is reported as designed and is not recomputed for the clamped length.
    """
    params = DriverParameters(fs, qts, vas)

    vb = params.vas * PORTED_VOLUME_RATIO
    fb = params.fs * PORTED_TUNING_RATIO

    port_diameter = PORT_DIAMETER_CM
    port_area = math.pi * (port_diameter / 2) ** 2
    if not math.isfinite(vb) or vb <= 0:
        raise InfeasibleDesignError(f"Ported box volume is not physical ({vb})")

    try:
        port_length = (HELMHOLTZ_CONSTANT * port_area) / (fb ** 2 * vb) - PORT_END_CORRECTION * port_diameter
    except (OverflowError, ZeroDivisionError):
        raise InfeasibleDesignError(f"Port length is not computable for fs={params.fs}, Vas={params.vas}")

    return PortedResult(
        box_volume_liters=vb,
        tuning_frequency_hz=fb,
        port_diameter_cm=port_diameter,
        port_length_cm=max(port_length, PORT_LENGTH_MIN_CM),
    )


def calculate_dimensions(volume_liters: float) -> PanelDimensions:
    """
    Golden-ratio box dimensions for a given volume.

    scale = ∛(V / (r1·r2·r3)), each side = r · scale rounded to 0.1.
    No liter → cm³ conversion is applied; saved designs rely on this scale.

    Raises:
        InfeasibleDesignError: if the volume is not positive and finite.
        NonPositiveGeometryError: if a side rounds to 0.0 cm.
    """
    volume = _require_positive('volume_liters', volume_liters)

    r1, r2, r3 = GOLDEN_RATIOS
    total_ratio = r1 * r2 * r3
    scale_factor = float(np.cbrt(volume / total_ratio))

    dimensions = PanelDimensions(
        width_cm=round_fixed(r1 * scale_factor, 1),
        height_cm=round_fixed(r2 * scale_factor, 1),
        depth_cm=round_fixed(r3 * scale_factor, 1),
    )
    for name, side in dimensions.to_dict().items():
        if side <= 0:
            raise NonPositiveGeometryError(
                f"Box volume {volume} L is too small: {name} rounds to {side}"
            )
    return dimensions


@dataclass
class EnclosureAlignment:
    """A selectable enclosure type and how to calculate it."""
    topology: EnclosureTopology
    description: str
    calculate: Callable  # Function(fs, qts, vas) → EnclosureResult


ENCLOSURE_TYPES: Dict[EnclosureTopology, EnclosureAlignment] = {
    EnclosureTopology.SEALED: EnclosureAlignment(
        topology=EnclosureTopology.SEALED,
        description='Sealed (acoustic suspension) box aligned to Qtc 0.707',
        calculate=calculate_sealed,
    ),
    EnclosureTopology.PORTED: EnclosureAlignment(
        topology=EnclosureTopology.PORTED,
        description='Ported (bass reflex) box, 2.5×Vas tuned to 0.8×fs with a 5 cm round port',
        calculate=calculate_ported,
    ),
}


def get_enclosure_type(name: Union[str, EnclosureTopology]) -> EnclosureAlignment:
    """Get an enclosure type by name."""
    try:
        topology = EnclosureTopology(name)
    except ValueError:
        raise ValueError(
            f"Unknown enclosure type '{name}'. Available: {[t.value for t in ENCLOSURE_TYPES]}"
        )
    return ENCLOSURE_TYPES[topology]


def list_enclosure_types() -> List[Dict]:
    return [
        {'name': a.topology.value, 'description': a.description}
        for a in ENCLOSURE_TYPES.values()
    ]


def calculate_enclosure(
    params: DriverParameters,
    topology: Union[str, EnclosureTopology],
) -> EnclosureResult:
    """Run the calculation for the selected enclosure type."""
    alignment = get_enclosure_type(topology)
    return alignment.calculate(params.fs, params.qts, params.vas)


def design_enclosure(
    params: DriverParameters,
    topology: Union[str, EnclosureTopology],
) -> EnclosureDesign:
    """Calculate the enclosure and derive its panel dimensions."""
    alignment = get_enclosure_type(topology)
    result = alignment.calculate(params.fs, params.qts, params.vas)
    return EnclosureDesign(
        driver=params,
        topology=alignment.topology,
        result=result,
        dimensions=calculate_dimensions(result.box_volume_liters),
    )


def summarize(design: EnclosureDesign) -> Dict[str, str]:
    """
    Human-readable figures for a results panel.

    Volume, frequencies and port length are shown with one decimal;
    Qtc and port diameter as their exact design constants.
    """
    dims = design.dimensions
    summary = {
        'box_volume': f"{format_fixed(design.box_volume_liters)} liters",
        'dimensions': (
            f"{format_fixed(dims.width_cm)} × {format_fixed(dims.height_cm)} × "
            f"{format_fixed(dims.depth_cm)} cm"
        ),
    }

    result = design.result
    if isinstance(result, SealedResult):
        summary['qtc'] = format_number(result.target_qtc)
        summary['f3'] = f"{format_fixed(result.cutoff_frequency_hz)} Hz"
    else:
        summary['tuning_frequency'] = f"{format_fixed(result.tuning_frequency_hz)} Hz"
        summary['port_diameter'] = f"{format_number(result.port_diameter_cm)} cm"
        summary['port_length'] = f"{format_fixed(result.port_length_cm)} cm"

    return summary
