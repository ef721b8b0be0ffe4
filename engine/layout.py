"""
DXF cut-sheet generation for enclosure panels.

Generates a minimal AutoCAD DXF (AC1015) document with:
- Front panel outline and driver cutout circle
- One side panel outline (cut 2)
- One top/bottom panel outline (cut 2)

Panels share one sheet without overlapping:

    y
    ^   +------+
    |   | side |  (depth x 2·height, starts 50 mm above the front panel)
    |   +------+
    |   +-------+    +-----+
    |   | front |    | top |  (depth x width, 50 mm right of the front panel)
    |   +-------+    +-----+
    +--------------------------> x

Inputs are in cm; the drawing is in mm. Every rectangle is written as four
independent LINE entities and each panel group is preceded by a 999
comment naming it.
"""

import math
from typing import Dict, List, Tuple

from engine.enclosure import DriverCutout, PanelDimensions
from engine.errors import NonPositiveGeometryError
from engine.formatting import format_number

CM_TO_MM = 10
PANEL_GUTTER_MM = 50
DRIVER_HEIGHT_RATIO = 0.382  # Golden-ratio point measured from the bottom edge
DXF_VERSION = 'AC1015'
DXF_LAYER = '0'

Point = Tuple[float, float]
Box = Tuple[float, float, float, float]  # (x_min, y_min, x_max, y_max)


def _validate_geometry(**values: float) -> Tuple[float, ...]:
    """Check each named value and return them as floats, in argument order."""
    numbers = []
    for name, value in values.items():
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise NonPositiveGeometryError(f"{name} must be a number, got {value!r}")
        if not math.isfinite(number) or number <= 0:
            raise NonPositiveGeometryError(f"{name} must be a positive finite number, got {value}")
        numbers.append(number)
    return tuple(numbers)


def _dxf_line(start: Point, end: Point) -> List[str]:
    return [
        '0', 'LINE',
        '8', DXF_LAYER,
        '10', format_number(start[0]),
        '20', format_number(start[1]),
        '11', format_number(end[0]),
        '21', format_number(end[1]),
    ]


def _dxf_circle(center: Point, radius: float) -> List[str]:
    return [
        '0', 'CIRCLE',
        '8', DXF_LAYER,
        '10', format_number(center[0]),
        '20', format_number(center[1]),
        '40', format_number(radius),
    ]


def _dxf_comment(text: str) -> List[str]:
    return ['999', text]


def _dxf_section(name: str, body: List[str] = ()) -> List[str]:
    return ['0', 'SECTION', '2', name, *body, '0', 'ENDSEC']


def _rectangle_edges(corners: List[Point]) -> List[str]:
    """Four LINE entities joining the corners in order, closing back to the first."""
    lines = []
    for i, start in enumerate(corners):
        lines.extend(_dxf_line(start, corners[(i + 1) % len(corners)]))
    return lines


def panel_outlines(width_cm: float, height_cm: float, depth_cm: float) -> Dict[str, Box]:
    """
    Bounding boxes (mm) of the three panel groups on the sheet.

    Returns:
        Dict with 'front', 'side' and 'top_bottom' → (x_min, y_min, x_max, y_max).
    """
    width_cm, height_cm, depth_cm = _validate_geometry(
        width_cm=width_cm, height_cm=height_cm, depth_cm=depth_cm
    )
    w = width_cm * CM_TO_MM
    h = height_cm * CM_TO_MM
    d = depth_cm * CM_TO_MM

    return {
        'front': (0, 0, w, h),
        'side': (0, h + PANEL_GUTTER_MM, d, h * 2 + PANEL_GUTTER_MM),
        'top_bottom': (w + PANEL_GUTTER_MM, 0, w + d + PANEL_GUTTER_MM, w),
    }


def generate_layout(
    width_cm: float,
    height_cm: float,
    depth_cm: float,
    driver_diameter_cm: float = 12,
) -> str:
    """
    Generate the DXF cut sheet for a box.

    Args:
        width_cm, height_cm, depth_cm: Outer box dimensions (cm).
        driver_diameter_cm: Driver cutout diameter (cm).

    Returns:
        DXF document text, newline separated, without a trailing newline.

    Raises:
        NonPositiveGeometryError: if any argument is zero, negative or not finite.
    """
    width_cm, height_cm, depth_cm, driver_diameter_cm = _validate_geometry(
        width_cm=width_cm,
        height_cm=height_cm,
        depth_cm=depth_cm,
        driver_diameter_cm=driver_diameter_cm,
    )

    w = width_cm * CM_TO_MM
    h = height_cm * CM_TO_MM
    d = depth_cm * CM_TO_MM

    driver_x = w / 2
    driver_y = h * DRIVER_HEIGHT_RATIO
    driver_radius = (driver_diameter_cm * CM_TO_MM) / 2

    width_label = format_number(width_cm)
    height_label = format_number(height_cm)
    depth_label = format_number(depth_cm)

    side_bottom = h + PANEL_GUTTER_MM
    side_top = h * 2 + PANEL_GUTTER_MM
    top_left = w + PANEL_GUTTER_MM
    top_right = w + d + PANEL_GUTTER_MM

    entities: List[str] = []

    entities += _dxf_comment(f"Front Panel ({width_label}x{height_label}cm)")
    entities += _rectangle_edges([(0, 0), (w, 0), (w, h), (0, h)])
    entities += _dxf_circle((driver_x, driver_y), driver_radius)

    entities += _dxf_comment(f"Side Panel ({depth_label}x{height_label}cm) - Cut 2")
    entities += _rectangle_edges([(0, side_bottom), (d, side_bottom), (d, side_top), (0, side_top)])

    entities += _dxf_comment(f"Top/Bottom Panel ({width_label}x{depth_label}cm) - Cut 2")
    entities += _rectangle_edges([(top_left, 0), (top_right, 0), (top_right, w), (top_left, w)])

    lines: List[str] = []
    lines += _dxf_section('HEADER', ['9', '$ACADVER', '1', DXF_VERSION])
    lines += _dxf_section('TABLES')
    lines += _dxf_section('BLOCKS')
    lines += _dxf_section('ENTITIES', entities)
    lines += ['0', 'EOF']

    return '\n'.join(lines)


def layout_from_dimensions(dimensions: PanelDimensions, cutout: DriverCutout) -> str:
    """Generate the DXF cut sheet from engine records."""
    return generate_layout(
        dimensions.width_cm,
        dimensions.height_cm,
        dimensions.depth_cm,
        cutout.diameter_cm,
    )


def cutout_warnings(width_cm: float, height_cm: float, driver_diameter_cm: float) -> List[str]:
    """
    Advisory checks on the driver cutout. Never blocks the drawing.
    """
    width_cm, height_cm, driver_diameter_cm = _validate_geometry(
        width_cm=width_cm, height_cm=height_cm, driver_diameter_cm=driver_diameter_cm
    )
    warnings = []

    radius = driver_diameter_cm / 2
    center_y = height_cm * DRIVER_HEIGHT_RATIO

    if driver_diameter_cm > width_cm:
        warnings.append(
            f"Driver cutout ({format_number(driver_diameter_cm)}cm) is wider than the "
            f"front panel ({format_number(width_cm)}cm)"
        )
    if center_y - radius < 0:
        warnings.append("Driver cutout extends below the bottom edge of the front panel")
    if center_y + radius > height_cm:
        warnings.append("Driver cutout extends above the top edge of the front panel")

    return warnings


def preview_geometry(
    width_cm: float,
    height_cm: float,
    depth_cm: float,
    driver_diameter_cm: float = 12,
) -> Dict:
    """
    Geometry for a 3D preview, in cm, origin at the box center.

    The driver sits on the front face, centered horizontally and at the
    same golden-ratio height as the drawn cutout.
    """
    width_cm, height_cm, depth_cm, driver_diameter_cm = _validate_geometry(
        width_cm=width_cm,
        height_cm=height_cm,
        depth_cm=depth_cm,
        driver_diameter_cm=driver_diameter_cm,
    )
    return {
        'box': {'width': width_cm, 'height': height_cm, 'depth': depth_cm},
        'driver': {
            'radius': driver_diameter_cm / 2,
            'position': {
                'x': 0,
                'y': (height_cm * DRIVER_HEIGHT_RATIO) - (height_cm / 2),
                'z': depth_cm / 2 + 0.01,  # just proud of the front face
            },
        },
    }
