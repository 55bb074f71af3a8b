from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

import shf.services.company as company_service
from shf.api.deps import (
    get_db,
    get_events_importer,
    get_optional_user,
    get_url_shortener,
    require_roles,
)
from shf.db.models.user import User
from shf.errors import NotFoundError
from shf.repositories.company import get_company_by_id
from shf.repositories.role import ADMIN
from shf.schemas.address import Address, AddressCreate
from shf.schemas.company import (
    Company,
    CompanyCreate,
    CompanyDetail,
    CompanyUpdate,
    ShortBrandUrl,
    ShortBrandUrlRequest,
)
from shf.schemas.pagination import PaginatedResponse
from shf.services.event_importer import EventsImporter
from shf.services.url_shortener import UrlShortener

router = APIRouter(prefix="/companies", tags=["companies"])


def _get_company_or_404(db: Session, company_id: int):
    company = get_company_by_id(db, company_id)
    if not company:
        raise NotFoundError("Company not found")
    return company


@router.get("", response_model=PaginatedResponse[Company])
def list_companies(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
):
    """
    List companies.
    - Admin: all companies
    - Members and anonymous visitors: only searchable companies (complete,
      backed by a current member, and holding a branding license)
    """
    companies, total = company_service.list_companies_for_user(
        db, current_user, page=page, page_size=page_size
    )
    return PaginatedResponse(
        items=[Company.model_validate(company) for company in companies],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=CompanyDetail, status_code=status.HTTP_201_CREATED)
def create_new_company(
    company_data: CompanyCreate,
    db: Session = Depends(get_db),
    events_importer: EventsImporter = Depends(get_events_importer),
    current_user: User = Depends(require_roles(ADMIN)),
):
    """Create a company. Only admin users can create companies."""
    fields = company_data.model_dump(exclude={"addresses"}, exclude_unset=True)
    fields.pop("company_number", None)
    company = company_service.create_company(
        db,
        company_number=company_data.company_number,
        addresses=[a.model_dump() for a in company_data.addresses],
        events_importer=events_importer,
        **fields,
    )
    return company_service.describe_company(db, company)


@router.get("/{company_id}", response_model=CompanyDetail)
def get_company_by_id_endpoint(
    company_id: int,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
):
    """
    Get a company with its derived state.
    - Admin: any company
    - Everyone else: only searchable companies
    """
    company = company_service.get_company_for_user(db, company_id, current_user)
    return company_service.describe_company(db, company)


@router.put("/{company_id}", response_model=CompanyDetail)
def update_company_by_id(
    company_id: int,
    company_data: CompanyUpdate,
    db: Session = Depends(get_db),
    events_importer: EventsImporter = Depends(get_events_importer),
    current_user: User = Depends(require_roles(ADMIN)),
):
    """
    Update a company. Only admin users can update companies.

    Fields not included in the request are not updated.
    """
    update_data = company_data.model_dump(exclude_unset=True)
    company = company_service.update_company(
        db, company_id=company_id, events_importer=events_importer, **update_data
    )
    return company_service.describe_company(db, company)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company_by_id(
    company_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    """Delete a company. Refused while the company has applications."""
    company_service.delete_company(db, company_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{company_id}/addresses", response_model=Address, status_code=status.HTTP_201_CREATED)
def add_company_address(
    company_id: int,
    address_data: AddressCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    address = company_service.add_address(db, company_id, **address_data.model_dump())
    return Address.model_validate(address)


@router.get("/{company_id}/main-address", response_model=Address)
def get_main_address(
    company_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    """The company's mailing address. Creates an empty one if the company has none."""
    company = _get_company_or_404(db, company_id)
    return Address.model_validate(company_service.main_address(db, company))


@router.get("/{company_id}/mailing-csv", response_class=PlainTextResponse)
def get_mailing_csv(
    company_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    company = _get_company_or_404(db, company_id)
    return company_service.mailing_csv_str(db, company)


@router.post("/{company_id}/short-brand-url", response_model=ShortBrandUrl)
def get_or_create_short_brand_url(
    company_id: int,
    request: ShortBrandUrlRequest,
    db: Session = Depends(get_db),
    url_shortener: UrlShortener = Depends(get_url_shortener),
    current_user: User = Depends(require_roles(ADMIN)),
):
    """Shorten the company's H-brand URL once; later calls return the stored value."""
    company = _get_company_or_404(db, company_id)
    short_url = company_service.get_short_h_brand_url(
        db, company, request.url, url_shortener=url_shortener
    )
    return ShortBrandUrl(short_url=short_url)


@router.post("/{company_id}/events/refresh", response_model=CompanyDetail)
def refresh_events(
    company_id: int,
    db: Session = Depends(get_db),
    events_importer: EventsImporter = Depends(get_events_importer),
    current_user: User = Depends(require_roles(ADMIN)),
):
    company = company_service.refresh_company_events(db, company_id, events_importer=events_importer)
    return company_service.describe_company(db, company)
