"""
Persistence of named enclosure calculations.

Usage:
    row = save_calculation(db, "Sub for the den", raw_text, design)
    rows = list_calculations(db)          # newest first
    row = get_calculation(db, row.id)
    delete_calculation(db, row.id)

Saving under an existing name replaces that calculation: the old row is
removed and a new one inserted, so it gets a fresh id and moves to the top
of the list.
"""

import logging
import math
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.models_db import Calculation
from engine.enclosure import EnclosureDesign
from engine.errors import InfeasibleDesignError, NonPositiveGeometryError

logger = logging.getLogger(__name__)

# One retry covers a single concurrent save of the same name
SAVE_ATTEMPTS = 2


class CalculationConflictError(Exception):
    """Another request kept saving under the same name while this one ran."""


def _find_existing(db: Session, name: str) -> Optional[Calculation]:
    return db.query(Calculation).filter(Calculation.name == name).first()


def _check_saveable(design: EnclosureDesign) -> None:
    volume = design.box_volume_liters
    if not math.isfinite(volume) or volume <= 0:
        raise InfeasibleDesignError(f"Refusing to save a design with box volume {volume}")
    for name, side in design.dimensions.to_dict().items():
        if not math.isfinite(side) or side <= 0:
            raise NonPositiveGeometryError(f"Refusing to save a design with {name} {side}")


def _replace(db: Session, name: str, raw_text: str, design: EnclosureDesign) -> Calculation:
    existing = _find_existing(db, name)
    if existing:
        logger.info("Replacing saved calculation %r (id=%s)", name, existing.id)
        db.delete(existing)
        db.flush()

    dims = design.dimensions
    row = Calculation(
        name=name,
        parsed_text=raw_text or "",
        fs=design.driver.fs,
        qts=design.driver.qts,
        vas=design.driver.vas,
        enclosure_type=design.topology.value,
        width=dims.width_cm,
        height=dims.height_cm,
        depth=dims.depth_cm,
        volume=design.box_volume_liters,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def save_calculation(db: Session, name: str, raw_text: str, design: EnclosureDesign) -> Calculation:
    """
    Insert or replace a calculation by name.

    Raises:
        InfeasibleDesignError: if the volume is not finite and positive.
        NonPositiveGeometryError: if a panel dimension is not positive.
        CalculationConflictError: if the name is still taken after a retry.
    """
    _check_saveable(design)

    for attempt in range(1, SAVE_ATTEMPTS + 1):
        try:
            return _replace(db, name, raw_text, design)
        except IntegrityError:
            db.rollback()
            logger.warning("Concurrent save of calculation %r (attempt %s)", name, attempt)

    raise CalculationConflictError(f"Calculation {name!r} is being saved by another request")


def list_calculations(db: Session) -> List[Calculation]:
    """All saved calculations, most recent first."""
    return (
        db.query(Calculation)
        .order_by(Calculation.created_at.desc(), Calculation.id.desc())
        .all()
    )


def get_calculation(db: Session, calculation_id: int) -> Optional[Calculation]:
    return db.get(Calculation, calculation_id)


def delete_calculation(db: Session, calculation_id: int) -> bool:
    row = db.get(Calculation, calculation_id)
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True
