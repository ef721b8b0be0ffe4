"""Enclosure routes — T/S parameters → box volume, alignment figures, panel sizes."""

from fastapi import APIRouter, HTTPException

from backend.models import (
    CalculateEnclosureRequest,
    CalculateEnclosureResponse,
    DriverParams,
    EnclosureTypeInfo,
    EnclosureTypeListResponse,
    PanelDimensionsModel,
)
from engine.enclosure import design_enclosure, list_enclosure_types, summarize
from engine.errors import (
    EnclosureDesignError,
    InfeasibleDesignError,
    MissingInputError,
    NonPositiveGeometryError,
)
from engine.inputs import parse_driver_inputs

router = APIRouter()


def http_error_for(error: EnclosureDesignError) -> HTTPException:
    """Map an engine error to an HTTP response the client can act on."""
    if isinstance(error, MissingInputError):
        return HTTPException(
            status_code=400,
            detail={"error": "missing_input", "message": str(error), "missing": error.missing},
        )
    if isinstance(error, NonPositiveGeometryError):
        return HTTPException(
            status_code=422,
            detail={"error": "non_positive_geometry", "message": str(error)},
        )
    if isinstance(error, InfeasibleDesignError):
        return HTTPException(
            status_code=422,
            detail={"error": "infeasible_design", "message": str(error)},
        )
    return HTTPException(status_code=400, detail={"error": "invalid_design", "message": str(error)})


@router.get("/enclosure-types", response_model=EnclosureTypeListResponse)
async def enclosure_types():
    """List the supported enclosure types."""
    return EnclosureTypeListResponse(
        enclosure_types=[EnclosureTypeInfo(**t) for t in list_enclosure_types()]
    )


@router.post("/calculate-enclosure", response_model=CalculateEnclosureResponse)
async def calculate_enclosure(request: CalculateEnclosureRequest):
    """Size an enclosure and derive golden-ratio panel dimensions."""
    try:
        params = parse_driver_inputs(request.fs, request.qts, request.vas)
        design = design_enclosure(params, request.enclosure_type)
    except EnclosureDesignError as e:
        raise http_error_for(e)

    return CalculateEnclosureResponse(
        enclosure_type=design.topology,
        driver=DriverParams(**design.driver.to_dict()),
        result=design.result.to_dict(),
        dimensions=PanelDimensionsModel(**design.dimensions.to_dict()),
        summary=summarize(design),
    )
