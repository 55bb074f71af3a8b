from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from shf.db.base import Base
from shf.domain.application_state import ApplicationState

application_business_categories = Table(
    "application_business_categories",
    Base.metadata,
    Column("application_id", Integer, ForeignKey("shf_applications.id", ondelete="CASCADE"), primary_key=True),
    Column("business_category_id", Integer, ForeignKey("business_categories.id"), primary_key=True),
)


class BusinessCategory(Base):
    __tablename__ = "business_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)


class Application(Base):
    """A membership application linking a user to a company."""

    __tablename__ = "shf_applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    state = Column(String(32), nullable=False, default=ApplicationState.NEW.value)

    # Relationships
    user = relationship("User", backref="applications")
    company = relationship("Company", back_populates="applications")
    business_categories = relationship(
        "BusinessCategory", secondary=application_business_categories, order_by="BusinessCategory.name"
    )
