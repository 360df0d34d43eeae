# ============================================================================
# FILE: booking_engine/api/dependencies.py
# Request-scoped lookups shared by the routers
# ============================================================================
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from uuid import UUID

from booking_engine.config.database import get_db
from booking_engine.models.establishment import Establishment


def get_current_establishment(
        x_establishment_id: UUID = Header(..., description="Establishment of the signed-in user"),
        db: Session = Depends(get_db)
) -> Establishment:
    """
    Tenant of a dashboard request.

    Sessions are handled upstream; the auth layer forwards the signed-in
    user's establishment in the ``X-Establishment-ID`` header.
    """
    establishment = db.query(Establishment).filter(Establishment.id == x_establishment_id).first()
    if not establishment:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User not associated with an establishment"
        )
    return establishment
