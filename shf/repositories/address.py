from sqlalchemy.orm import Session, joinedload

from shf.db.models.address import Address as AddressModel
from shf.db.models.company import ADDRESSABLE_TYPE


def get_mail_address(db: Session, company_id: int) -> AddressModel | None:
    """The address a company flagged as its mailing address, with its region loaded."""
    return (
        db.query(AddressModel)
        .options(joinedload(AddressModel.region))
        .filter(
            AddressModel.addressable_type == ADDRESSABLE_TYPE,
            AddressModel.addressable_id == company_id,
            AddressModel.mail.is_(True),
        )
        .order_by(AddressModel.id)
        .first()
    )


def get_first_address(db: Session, company_id: int) -> AddressModel | None:
    """The company's first address by id, with its region loaded."""
    return (
        db.query(AddressModel)
        .options(joinedload(AddressModel.region))
        .filter(
            AddressModel.addressable_type == ADDRESSABLE_TYPE,
            AddressModel.addressable_id == company_id,
        )
        .order_by(AddressModel.id)
        .first()
    )
