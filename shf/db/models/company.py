from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, event
from sqlalchemy.orm import relationship

from shf.db.base import Base
from shf.db.models.address import Address

ADDRESSABLE_TYPE = "Company"


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    company_number = Column(String(10), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(320), nullable=True)
    phone_number = Column(String(32), nullable=True)
    website = Column(String(1024), nullable=True)
    description = Column(Text, nullable=True)
    short_h_brand_url = Column(String(255), nullable=True)
    calendar_key = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    applications = relationship(
        "Application", back_populates="company", cascade="all, delete-orphan", order_by="Application.id"
    )
    events = relationship(
        "Event", back_populates="company", cascade="all, delete-orphan", order_by="Event.start_date"
    )
    payments = relationship(
        "Payment", back_populates="company", cascade="all, delete-orphan", order_by="Payment.created_at"
    )
    pictures = relationship("Picture", back_populates="company", cascade="all, delete-orphan")
    addresses = relationship(
        "Address",
        primaryjoin=(
            f"and_(Company.id == foreign(Address.addressable_id), "
            f"Address.addressable_type == '{ADDRESSABLE_TYPE}')"
        ),
        cascade="all, delete-orphan",
        order_by="Address.id",
    )


@event.listens_for(Company.addresses, "append")
def _set_addressable_type(company, address: Address, initiator):
    address.addressable_type = ADDRESSABLE_TYPE
