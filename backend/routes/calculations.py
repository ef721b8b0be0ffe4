"""Saved calculation routes — save, list, load, delete."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.models import (
    CalculationListResponse,
    CalculationRecord,
    CalculationSummary,
    SaveCalculationRequest,
)
from backend.models_db import Calculation
from backend.routes.enclosure import http_error_for
from backend.services.calculation_store import (
    CalculationConflictError,
    delete_calculation,
    get_calculation,
    list_calculations,
    save_calculation,
)
from engine.enclosure import design_enclosure
from engine.errors import EnclosureDesignError
from engine.inputs import parse_driver_inputs

router = APIRouter()


def _to_record(row: Calculation) -> CalculationRecord:
    return CalculationRecord(
        id=row.id,
        name=row.name,
        raw_text=row.parsed_text or "",
        fs=row.fs,
        qts=row.qts,
        vas=row.vas,
        enclosure_type=row.enclosure_type,
        width=row.width,
        height=row.height,
        depth=row.depth,
        volume=row.volume,
        created_at=row.created_at,
    )


@router.get("/calculations", response_model=CalculationListResponse)
async def list_saved(db: Session = Depends(get_db)):
    """List saved calculations, most recent first."""
    rows = list_calculations(db)
    return CalculationListResponse(
        calculations=[CalculationSummary(id=r.id, name=r.name, created_at=r.created_at) for r in rows],
        total=len(rows),
    )


@router.post("/calculations", response_model=CalculationRecord)
async def save(body: SaveCalculationRequest, db: Session = Depends(get_db)):
    """Calculate and save under a name, replacing any calculation with that name."""
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Please enter a name for this calculation.")

    try:
        params = parse_driver_inputs(body.fs, body.qts, body.vas)
        design = design_enclosure(params, body.enclosure_type)
        row = save_calculation(db, name, body.raw_text, design)
    except EnclosureDesignError as e:
        raise http_error_for(e)
    except CalculationConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _to_record(row)


@router.get("/calculations/{calculation_id}", response_model=CalculationRecord)
async def load(calculation_id: int, db: Session = Depends(get_db)):
    row = get_calculation(db, calculation_id)
    if not row:
        raise HTTPException(status_code=404, detail="Calculation not found")
    return _to_record(row)


@router.delete("/calculations/{calculation_id}")
async def delete(calculation_id: int, db: Session = Depends(get_db)):
    if not delete_calculation(db, calculation_id):
        raise HTTPException(status_code=404, detail="Calculation not found")
    return {"deleted": calculation_id}
