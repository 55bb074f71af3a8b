import logging
import re
from datetime import date, timedelta

from sqlalchemy import inspect
from sqlalchemy.orm import Session

import shf.repositories.address as address_repo
import shf.repositories.application as application_repo
import shf.repositories.company as company_repo
import shf.repositories.geography as geography_repo
from shf.db.models.address import Address as AddressModel
from shf.db.models.company import Company as CompanyModel
from shf.db.models.user import User
from shf.domain import org_number
from shf.domain.company_rules import CompanyRules
from shf.errors import BASE, FieldError, ModelValidationError, NotFoundError
from shf.repositories.role import ADMIN
from shf.schemas.address import Address
from shf.schemas.company import CompanyDetail
from shf.services import sanitizer
from shf.services.address_exporter import se_mailing_csv_str
from shf.services.event_importer import EventsImporter, InvalidKeyError, MalformedKeyError
from shf.services.url_shortener import UrlShortener

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"[^@\s]+@(?:[-a-z0-9]+\.)+[a-z]{2,}", re.IGNORECASE)

COMPANY_NUMBER_LENGTH = 10
COMPANY_NUMBER_TAKEN = "is already registered to another company"
COMPANY_HAS_ACTIVE_MEMBERSHIPS = "The company cannot be deleted while it has members or applications"

_COMPANY_FIELDS = (
    "company_number",
    "name",
    "email",
    "phone_number",
    "website",
    "description",
    "calendar_key",
)


def _is_admin(user: User | None) -> bool:
    return user is not None and user.role.name == ADMIN


# ============================================================================
# VALIDATION AND SAVE PIPELINE
# ============================================================================


def sanitize_company(company: CompanyModel) -> None:
    """Strip executable content from the free-text fields. Runs before every save.

    Surrounding whitespace, tabs and newlines included, is removed from the name.
    """
    if company.name is not None:
        company.name = company.name.strip()
    company.website = sanitizer.sanitize_url(company.website)
    company.description = sanitizer.sanitize_html(company.description)


def validate_company(db: Session, company: CompanyModel) -> list[FieldError]:
    """Collect every rule the company breaks. An empty list means it may be saved."""
    errors: list[FieldError] = []
    number = company.company_number

    if not number or not number.strip():
        errors.append(FieldError("company_number", "blank", "can't be blank"))
    else:
        with db.no_autoflush:
            duplicate = company_repo.get_company_by_company_number(db, number, exclude_id=company.id)
        if duplicate:
            errors.append(FieldError("company_number", "taken", COMPANY_NUMBER_TAKEN))
        if len(number) != COMPANY_NUMBER_LENGTH:
            errors.append(
                FieldError(
                    "company_number",
                    "wrong_length",
                    f"is the wrong length (should be {COMPANY_NUMBER_LENGTH} characters)",
                )
            )
        if not org_number.is_valid(number):
            errors.append(
                FieldError("company_number", "invalid_org_number", "is not a valid Swedish organisation number")
            )

    if company.email and not EMAIL_RE.fullmatch(company.email):
        errors.append(FieldError("email", "invalid", "is invalid"))

    return errors


def fetch_external_events(
    db: Session,
    company: CompanyModel,
    on_update: bool = True,
    events_importer: EventsImporter | None = None,
) -> None:
    """
    Replace the company's events with the ones in its external calendar.

    - On update, does nothing unless calendar_key changed in this save
    - Clears the current events; a blank key leaves the company without events
    - Imports events starting yesterday or later

    Raises:
        ModelValidationError: If the calendar rejects the key ("invalid") or the
            key cannot be sent ("invalid_chars"). The caller rolls back.
    """
    if on_update and not inspect(company).attrs.calendar_key.history.has_changes():
        return

    company.events.clear()
    if not company.calendar_key or not company.calendar_key.strip():
        return

    importer = events_importer or EventsImporter()
    start_date = date.today() - timedelta(days=1)
    try:
        importer.import_events(db, company, start_date)
    except InvalidKeyError as e:
        logger.warning("Calendar rejected key for company %s: %s", company.id, e)
        raise ModelValidationError([FieldError("calendar_key", "invalid", "is not a known calendar key")])
    except MalformedKeyError as e:
        logger.warning("Malformed calendar key for company %s: %s", company.id, e)
        raise ModelValidationError([FieldError("calendar_key", "invalid_chars", "contains invalid characters")])


def _save(
    db: Session,
    company: CompanyModel,
    on_update: bool,
    events_importer: EventsImporter | None,
) -> CompanyModel:
    """sanitize -> validate -> persist -> sync events, all in one transaction."""
    sanitize_company(company)
    errors = validate_company(db, company)
    if errors:
        db.rollback()
        raise ModelValidationError(errors)

    try:
        if company.id is None:
            company_repo.add_company(db, company)
        fetch_external_events(db, company, on_update=on_update, events_importer=events_importer)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(company)
    return company


# ============================================================================
# LIFECYCLE
# ============================================================================


def create_company(
    db: Session,
    company_number: str,
    addresses: list[dict] | None = None,
    events_importer: EventsImporter | None = None,
    **fields,
) -> CompanyModel:
    """
    Create a company with its addresses.

    Raises:
        ModelValidationError: If a validation rule fails or the calendar key is rejected
        NotFoundError: If an address refers to an unknown region or kommun
    """
    company = CompanyModel(company_number=company_number)
    for name in _COMPANY_FIELDS:
        if name in fields:
            setattr(company, name, fields[name])

    for address_fields in addresses or []:
        company.addresses.append(_build_address(db, address_fields))

    return _save(db, company, on_update=False, events_importer=events_importer)


def update_company(
    db: Session,
    company_id: int,
    events_importer: EventsImporter | None = None,
    **update_fields,
) -> CompanyModel:
    """
    Update a company. Only fields explicitly provided are changed.

    Events are re-imported only when calendar_key changes.

    Raises:
        NotFoundError: If the company doesn't exist
        ModelValidationError: If a validation rule fails or the calendar key is rejected
    """
    company = company_repo.get_company_by_id(db, company_id)
    if not company:
        raise NotFoundError("Company not found")

    for name in _COMPANY_FIELDS:
        if name in update_fields:
            setattr(company, name, update_fields[name])

    return _save(db, company, on_update=True, events_importer=events_importer)


def refresh_company_events(
    db: Session, company_id: int, events_importer: EventsImporter | None = None
) -> CompanyModel:
    """Re-import a company's events regardless of whether its key changed."""
    company = company_repo.get_company_by_id(db, company_id)
    if not company:
        raise NotFoundError("Company not found")

    try:
        fetch_external_events(db, company, on_update=False, events_importer=events_importer)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(company)
    return company


def delete_company(db: Session, company_id: int) -> None:
    """
    Delete a company with everything it owns.

    Applications are re-read from the database first; any application that is
    not itself being destroyed blocks the deletion.

    Raises:
        NotFoundError: If the company doesn't exist
        ModelValidationError: With a base error if live applications exist
    """
    company = company_repo.get_company_by_id(db, company_id)
    if not company:
        raise NotFoundError("Company not found")

    live_applications = application_repo.get_live_applications_by_company_id(db, company_id)
    if live_applications:
        raise ModelValidationError(
            [FieldError(BASE, "company_has_active_memberships", COMPANY_HAS_ACTIVE_MEMBERSHIPS)]
        )

    company_repo.delete_company(db, company)
    db.commit()
    logger.info("Deleted company %s", company_id)


# ============================================================================
# ADDRESSES
# ============================================================================


def _build_address(db: Session, fields: dict) -> AddressModel:
    region_id = fields.get("region_id")
    if region_id is not None and not geography_repo.get_region_by_id(db, region_id):
        raise NotFoundError(f"Region with id {region_id} not found")
    kommun_id = fields.get("kommun_id")
    if kommun_id is not None and not geography_repo.get_kommun_by_id(db, kommun_id):
        raise NotFoundError(f"Kommun with id {kommun_id} not found")
    return AddressModel(**fields)


def add_address(db: Session, company_id: int, **fields) -> AddressModel:
    """
    Add an address to a company.

    Flagging the new address as the mailing address clears the flag on the others.

    Raises:
        NotFoundError: If the company, region or kommun doesn't exist
    """
    company = company_repo.get_company_by_id(db, company_id)
    if not company:
        raise NotFoundError("Company not found")

    address = _build_address(db, fields)
    if address.mail:
        for other in company.addresses:
            other.mail = False
    company.addresses.append(address)
    db.commit()
    db.refresh(address)
    return address


def main_address(db: Session, company: CompanyModel) -> AddressModel:
    """
    The address to send post to.

    1. the address flagged as mailing address
    2. otherwise the first address
    3. otherwise a new, empty address, which is attached to the company and saved
    """
    address = address_repo.get_mail_address(db, company.id)
    if address:
        return address

    address = address_repo.get_first_address(db, company.id)
    if address:
        return address

    new_address = AddressModel()
    company.addresses.append(new_address)
    db.commit()
    db.refresh(new_address)
    return new_address


def mailing_csv_str(db: Session, company: CompanyModel) -> str:
    return se_mailing_csv_str(main_address(db, company))


# ============================================================================
# H-BRAND URL
# ============================================================================


def get_short_h_brand_url(
    db: Session,
    company: CompanyModel,
    url: str,
    url_shortener: UrlShortener | None = None,
) -> str:
    """
    Return the stored short H-brand URL, shortening ``url`` the first time.

    If the shortener fails the long URL is returned and nothing is stored.
    """
    if company.short_h_brand_url:
        return company.short_h_brand_url

    shortener = url_shortener or UrlShortener()
    short_url = shortener.shorten(url)
    if not short_url:
        return url

    company.short_h_brand_url = short_url
    db.commit()
    return short_url


# ============================================================================
# READ ACCESS
# ============================================================================


def list_companies_for_user(
    db: Session,
    current_user: User | None,
    page: int = 1,
    page_size: int = 100,
) -> tuple[list[CompanyModel], int]:
    """
    List companies visible to the given user.

    - Admin: all companies
    - Anyone else, including anonymous visitors: only searchable companies
    """
    return company_repo.get_companies_paginated(
        db,
        page=page,
        page_size=page_size,
        searchable_only=not _is_admin(current_user),
    )


def get_company_for_user(db: Session, company_id: int, current_user: User | None) -> CompanyModel:
    """
    Get a company the given user may see.

    Raises:
        NotFoundError: If it doesn't exist, or it is not searchable and the user is not an admin
    """
    company = company_repo.get_company_by_id(db, company_id)
    if not company:
        raise NotFoundError("Company not found")
    if not _is_admin(current_user) and not CompanyRules(as_of=date.today()).is_searchable(company):
        raise NotFoundError("Company not found")
    return company


def describe_company(db: Session, company: CompanyModel, as_of: date | None = None) -> CompanyDetail:
    """A company together with its derived state."""
    rules = CompanyRules(as_of=as_of or date.today())
    return CompanyDetail(
        id=company.id,
        company_number=company.company_number,
        name=company.name,
        email=company.email,
        phone_number=company.phone_number,
        website=company.website,
        description=company.description,
        short_h_brand_url=company.short_h_brand_url,
        calendar_key=company.calendar_key,
        addresses=[Address.model_validate(a) for a in company.addresses],
        complete=rules.is_complete(company),
        missing_region=rules.missing_region(company),
        branding_license=rules.has_branding_license(company),
        branding_expire_date=rules.branding_expire_date(company),
        branding_payment_notes=rules.branding_payment_notes(company),
        searchable=rules.is_searchable(company),
        any_visible_addresses=rules.any_visible_addresses(company),
        earliest_current_member_fee_paid=rules.earliest_current_member_fee_paid(company),
        categories=company_repo.get_category_names(db, company.id),
        regions=company_repo.get_region_names(db, company.id),
        kommuns=company_repo.get_kommun_names(db, company.id),
        cities=company_repo.get_city_names(db, company.id),
    )
