# ============================================================================
# booking_engine/api/v1/dashboard/establishments.py
# Establishment dashboard - booking rules
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from booking_engine.api.dependencies import get_current_establishment
from booking_engine.config.database import get_db
from booking_engine.models.establishment import Establishment
from booking_engine.schemas.booking import BookingRulesUpdate
from booking_engine.services.availability.booking_horizon import parse_earliest_policy, parse_latest_policy
from booking_engine.services.availability.calendar_rules import merge_working_hours
from booking_engine.services.customer.required_fields import validate_required_field_names

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/establishments", tags=["dashboard-establishments"])


@router.patch("/{establishment_id}/booking-rules")
async def update_booking_rules(
        rules: BookingRulesUpdate,
        establishment_id: UUID = Path(..., description="The establishment ID"),
        establishment: Establishment = Depends(get_current_establishment),
        db: Session = Depends(get_db)
):
    """
    Update booking rules. Everything is validated before anything is saved;
    unknown horizon policies are rejected here rather than at booking time.
    """
    if establishment.id != establishment_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have access to this establishment"
        )

    changes = rules.model_dump(exclude_unset=True)

    if "earliest_booking_time" in changes:
        changes["earliest_booking_time"] = parse_earliest_policy(changes["earliest_booking_time"]).value
    if "latest_booking_time" in changes:
        changes["latest_booking_time"] = parse_latest_policy(changes["latest_booking_time"]).value
    if changes.get("working_hours") is not None:
        changes["working_hours"] = merge_working_hours(establishment.working_hours, changes["working_hours"])
    if changes.get("required_fields") is not None:
        changes["required_fields"] = validate_required_field_names(changes["required_fields"])

    for key, value in changes.items():
        if value is not None:
            setattr(establishment, key, value)

    db.commit()
    db.refresh(establishment)
    logger.info(f"Updated booking rules of establishment {establishment.id}: {sorted(changes)}")

    return {"success": True, "establishment": establishment.to_dict()}
