from shf.db.models.role import Role
from shf.db.models.user import User
from shf.db.models.geography import Kommun, Region
from shf.db.models.address import Address
from shf.db.models.company import Company
from shf.db.models.application import Application, BusinessCategory
from shf.db.models.payment import Payment
from shf.db.models.event import Event, Picture

__all__ = [
    "Role",
    "User",
    "Region",
    "Kommun",
    "Address",
    "Company",
    "Application",
    "BusinessCategory",
    "Payment",
    "Event",
    "Picture",
]
