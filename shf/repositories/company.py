from datetime import date

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session, joinedload

from shf.db.models.address import Address as AddressModel
from shf.db.models.application import Application as ApplicationModel
from shf.db.models.application import BusinessCategory as BusinessCategoryModel
from shf.db.models.application import application_business_categories
from shf.db.models.company import ADDRESSABLE_TYPE
from shf.db.models.company import Company as CompanyModel
from shf.db.models.geography import Kommun as KommunModel
from shf.db.models.geography import Region as RegionModel
from shf.db.models.payment import Payment as PaymentModel
from shf.db.models.user import User as UserModel
from shf.domain.application_state import ApplicationState
from shf.domain.company_rules import HIDDEN_VISIBILITY
from shf.domain.membership import MembershipPolicy
from shf.domain.payment_terms import PAYMENT_TYPE_BRANDING, PaymentTermsPolicy


def get_company_by_id(db: Session, company_id: int) -> CompanyModel | None:
    """Get a company by ID."""
    return db.query(CompanyModel).filter(CompanyModel.id == company_id).first()


def get_company_by_company_number(
    db: Session, company_number: str, exclude_id: int | None = None
) -> CompanyModel | None:
    """Get a company by organisation number. Used to check for duplicates."""
    query = db.query(CompanyModel).filter(CompanyModel.company_number == company_number)
    if exclude_id is not None:
        query = query.filter(CompanyModel.id != exclude_id)
    return query.first()


def add_company(db: Session, company: CompanyModel) -> CompanyModel:
    """Stage a new company in the current transaction. The caller commits."""
    db.add(company)
    db.flush()
    return company


def delete_company(db: Session, company: CompanyModel) -> None:
    """Delete a company and everything it owns. The caller commits."""
    db.delete(company)
    db.flush()


# ============================================================================
# COLLECTION FILTERS
#
# Each predicate is the SQL form of the matching rule in
# shf.domain.company_rules.CompanyRules. EXISTS subqueries keep the results
# distinct without a DISTINCT over the joined rows.
# ============================================================================


def lacking_region_owner_ids():
    """Ids of companies owning at least one address without a region."""
    return select(AddressModel.addressable_id).where(
        AddressModel.addressable_type == ADDRESSABLE_TYPE,
        AddressModel.region_id.is_(None),
    )


def complete_predicate():
    return and_(
        CompanyModel.name.isnot(None),
        func.trim(CompanyModel.name) != "",
        CompanyModel.id.not_in(lacking_region_owner_ids()),
    )


def branding_licensed_predicate(as_of: date):
    policy = PaymentTermsPolicy(as_of=as_of)
    return CompanyModel.payments.any(
        policy.sqlalchemy_counts_predicate(
            type_col=PaymentModel.payment_type,
            status_col=PaymentModel.status,
            expire_col=PaymentModel.expire_date,
            wanted_type=PAYMENT_TYPE_BRANDING,
        )
    )


def address_visible_predicate():
    return CompanyModel.addresses.any(AddressModel.visibility != HIDDEN_VISIBILITY)


def with_members_predicate(as_of: date):
    policy = MembershipPolicy(as_of=as_of)
    return CompanyModel.applications.any(
        and_(
            ApplicationModel.state == ApplicationState.ACCEPTED.value,
            ApplicationModel.user.has(
                policy.sqlalchemy_current_predicate(
                    member_col=UserModel.member,
                    start_col=UserModel.membership_start_date,
                    expire_col=UserModel.membership_expire_date,
                )
            ),
        )
    )


def searchable_predicate(as_of: date):
    """Companies shown to visitors who are not admins."""
    return and_(
        complete_predicate(),
        with_members_predicate(as_of),
        branding_licensed_predicate(as_of),
    )


def _filtered(db: Session, predicate) -> list[CompanyModel]:
    return db.query(CompanyModel).filter(predicate).order_by(CompanyModel.id).all()


def get_complete_companies(db: Session) -> list[CompanyModel]:
    return _filtered(db, complete_predicate())


def get_branding_licensed_companies(db: Session, as_of: date | None = None) -> list[CompanyModel]:
    return _filtered(db, branding_licensed_predicate(as_of or date.today()))


def get_address_visible_companies(db: Session) -> list[CompanyModel]:
    return _filtered(db, address_visible_predicate())


def get_companies_with_members(db: Session, as_of: date | None = None) -> list[CompanyModel]:
    return _filtered(db, with_members_predicate(as_of or date.today()))


def get_searchable_companies(db: Session, as_of: date | None = None) -> list[CompanyModel]:
    return _filtered(db, searchable_predicate(as_of or date.today()))


def get_companies_at_addresses(db: Session, addresses: list[AddressModel]) -> list[CompanyModel]:
    """Get the companies owning any of the given addresses."""
    owner_ids = {a.addressable_id for a in addresses if a.addressable_type == ADDRESSABLE_TYPE}
    if not owner_ids:
        return []
    return _filtered(db, CompanyModel.id.in_(owner_ids))


def get_companies_with_calendar_key(db: Session) -> list[CompanyModel]:
    return _filtered(db, and_(CompanyModel.calendar_key.isnot(None), CompanyModel.calendar_key != ""))


def get_companies_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    searchable_only: bool = True,
    as_of: date | None = None,
) -> tuple[list[CompanyModel], int]:
    """
    Get companies with pagination.

    Args:
        page: Page number (1-indexed)
        page_size: Number of items per page
        searchable_only: Restrict to companies visitors may see (default True)
        as_of: Date the membership and payment rules are evaluated at (default today)

    Returns:
        Tuple of (list of companies, total count)
    """
    query = db.query(CompanyModel)
    if searchable_only:
        query = query.filter(searchable_predicate(as_of or date.today()))

    total = query.count()
    skip = (page - 1) * page_size
    companies = query.order_by(CompanyModel.name, CompanyModel.id).offset(skip).limit(page_size).all()
    return companies, total


# ============================================================================
# DERIVED NAME LISTS
# ============================================================================


def _company_addresses(company_id: int):
    return and_(
        AddressModel.addressable_type == ADDRESSABLE_TYPE,
        AddressModel.addressable_id == company_id,
    )


def get_category_names(db: Session, company_id: int) -> list[str]:
    """Distinct business category names across the company's applications."""
    stmt = (
        select(BusinessCategoryModel.name)
        .join(
            application_business_categories,
            application_business_categories.c.business_category_id == BusinessCategoryModel.id,
        )
        .join(ApplicationModel, ApplicationModel.id == application_business_categories.c.application_id)
        .where(ApplicationModel.company_id == company_id)
        .distinct()
        .order_by(BusinessCategoryModel.name)
    )
    return list(db.scalars(stmt))


def get_region_names(db: Session, company_id: int) -> list[str]:
    stmt = (
        select(RegionModel.name)
        .join(AddressModel, AddressModel.region_id == RegionModel.id)
        .where(_company_addresses(company_id))
        .distinct()
        .order_by(RegionModel.name)
    )
    return list(db.scalars(stmt))


def get_kommun_names(db: Session, company_id: int) -> list[str]:
    stmt = (
        select(KommunModel.name)
        .join(AddressModel, AddressModel.kommun_id == KommunModel.id)
        .where(_company_addresses(company_id))
        .distinct()
        .order_by(KommunModel.name)
    )
    return list(db.scalars(stmt))


def get_city_names(db: Session, company_id: int) -> list[str]:
    stmt = (
        select(AddressModel.city)
        .where(_company_addresses(company_id), AddressModel.city.isnot(None), AddressModel.city != "")
        .distinct()
        .order_by(AddressModel.city)
    )
    return list(db.scalars(stmt))


def get_approved_applications_from_members(
    db: Session, company_id: int, as_of: date | None = None
) -> list[ApplicationModel]:
    """Accepted applications whose users hold a current membership, by user last name."""
    policy = MembershipPolicy(as_of=as_of or date.today())
    return (
        db.query(ApplicationModel)
        .join(UserModel, UserModel.id == ApplicationModel.user_id)
        .options(joinedload(ApplicationModel.user))
        .filter(
            ApplicationModel.company_id == company_id,
            ApplicationModel.state == ApplicationState.ACCEPTED.value,
            policy.sqlalchemy_current_predicate(
                member_col=UserModel.member,
                start_col=UserModel.membership_start_date,
                expire_col=UserModel.membership_expire_date,
            ),
        )
        .order_by(UserModel.last_name)
        .all()
    )
