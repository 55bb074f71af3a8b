from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shf.db.base import Base


class Address(Base):
    """A postal address owned by any "addressable" record.

    The owner is referenced by (addressable_type, addressable_id) rather than
    a foreign key so several owner tables can share this one.
    """

    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    addressable_type = Column(String(64), nullable=False)
    addressable_id = Column(Integer, nullable=False, index=True)
    street_address = Column(String(255), nullable=True)
    post_code = Column(String(16), nullable=True)
    city = Column(String(255), nullable=True)
    country = Column(String(255), nullable=False, default="Sverige")
    region_id = Column(Integer, ForeignKey("regions.id"), nullable=True)
    kommun_id = Column(Integer, ForeignKey("kommuns.id"), nullable=True)
    visibility = Column(String(32), nullable=False, default="street_address")
    mail = Column(Boolean, nullable=False, default=False)

    # Relationships
    region = relationship("Region")
    kommun = relationship("Kommun")
