"""Export routes — DXF panel cut sheet and 3D preview geometry."""

import logging

from fastapi import APIRouter
from fastapi.responses import Response

from backend.models import LayoutRequest, LayoutResponse, PanelDimensionsModel
from backend.routes.enclosure import http_error_for
from engine.errors import EnclosureDesignError
from engine.inputs import resolve_layout_inputs
from engine.layout import cutout_warnings, generate_layout, panel_outlines, preview_geometry

logger = logging.getLogger(__name__)

router = APIRouter()

DXF_FILENAME = "speaker_box.dxf"
DXF_MEDIA_TYPE = "application/dxf"


def _render(request: LayoutRequest):
    width, height, depth, driver_size = resolve_layout_inputs(
        request.width, request.height, request.depth, request.driver_size
    )
    try:
        dxf = generate_layout(width, height, depth, driver_size)
    except EnclosureDesignError as e:
        raise http_error_for(e)
    return dxf, (width, height, depth, driver_size)


@router.post("/generate-layout", response_model=LayoutResponse)
async def generate_layout_endpoint(request: LayoutRequest):
    """Generate the DXF cut sheet with panel outlines, warnings and preview geometry."""
    dxf, (width, height, depth, driver_size) = _render(request)

    warnings = cutout_warnings(width, height, driver_size)
    if warnings:
        logger.info("Layout %sx%sx%s cm with %s cm driver: %s", width, height, depth, driver_size, warnings)

    return LayoutResponse(
        dxf=dxf,
        dimensions=PanelDimensionsModel(width_cm=width, height_cm=height, depth_cm=depth),
        driver_size_cm=driver_size,
        outlines={name: list(box) for name, box in panel_outlines(width, height, depth).items()},
        warnings=warnings,
        preview=preview_geometry(width, height, depth, driver_size),
    )


@router.post("/export-dxf")
async def export_dxf(request: LayoutRequest):
    """Download the DXF cut sheet as a file."""
    dxf, _ = _render(request)
    return Response(
        content=dxf,
        media_type=DXF_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={DXF_FILENAME}"},
    )
