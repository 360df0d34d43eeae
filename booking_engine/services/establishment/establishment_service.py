# booking_engine/services/establishment/establishment_service.py
"""Tenant and service lookup for public and dashboard requests"""
from typing import Optional
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Session

from booking_engine.core.errors import ValidationError
from booking_engine.models.establishment import Establishment
from booking_engine.models.service import Service


def _as_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class EstablishmentService:

    @staticmethod
    def get_establishment(db: Session, identifier: str) -> Establishment:
        """
        Resolve an establishment by slug, booking slug or id.

        Raises:
            ValidationError: unknown or inactive establishment
        """
        conditions = [Establishment.slug == identifier, Establishment.booking_slug == identifier]
        establishment_id = _as_uuid(identifier)
        if establishment_id:
            conditions.append(Establishment.id == establishment_id)

        establishment = db.query(Establishment).filter(
            or_(*conditions),
            Establishment.is_active == True
        ).first()

        if not establishment:
            raise ValidationError("Establishment not found", field="establishment")
        return establishment

    @staticmethod
    def get_service(db: Session, establishment: Establishment, service_id) -> Service:
        """
        Active service owned by the establishment.

        Raises:
            ValidationError: unknown, foreign or inactive service
        """
        parsed_id = service_id if isinstance(service_id, uuid.UUID) else _as_uuid(service_id)
        service = None
        if parsed_id:
            service = db.query(Service).filter(
                Service.id == parsed_id,
                Service.establishment_id == establishment.id,
                Service.is_active == True
            ).first()

        if not service:
            raise ValidationError("Service not found for this establishment", field="service")
        return service
