# booking_engine/models/customer.py
"""
Customers are a global identity keyed by phone, shared across establishments
through CustomerEstablishmentLink.
"""
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from booking_engine.models.base import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    phone = Column(String(20), nullable=False, unique=True, index=True)

    name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    birth_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    establishment_links = relationship("CustomerEstablishmentLink", back_populates="customer")
    appointments = relationship("Appointment", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.id}, phone={self.phone})>"

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}" if self.last_name else self.name

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
        }


class CustomerEstablishmentLink(Base):
    __tablename__ = "customer_establishments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)
    establishment_id = Column(Uuid, ForeignKey("establishments.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer = relationship("Customer", back_populates="establishment_links")

    __table_args__ = (
        UniqueConstraint("customer_id", "establishment_id", name="uq_customer_establishment"),
    )
