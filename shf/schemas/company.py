from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from shf.schemas.address import Address, AddressCreate


class Company(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_number: str
    name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    website: str | None = None
    description: str | None = None
    short_h_brand_url: str | None = None
    calendar_key: str | None = None


class CompanyDetail(Company):
    """A company together with its derived state."""

    addresses: list[Address] = []
    complete: bool
    missing_region: bool
    branding_license: bool
    branding_expire_date: date | None = None
    branding_payment_notes: str | None = None
    searchable: bool
    any_visible_addresses: bool
    earliest_current_member_fee_paid: date | None = None
    categories: list[str] = []
    regions: list[str] = []
    kommuns: list[str] = []
    cities: list[str] = []


class CompanyCreate(BaseModel):
    company_number: str
    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=320)
    phone_number: str | None = Field(None, max_length=32)
    website: str | None = Field(None, max_length=1024)
    description: str | None = None
    calendar_key: str | None = Field(None, max_length=255)
    addresses: list[AddressCreate] = []


class CompanyUpdate(BaseModel):
    company_number: str | None = None
    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=320)
    phone_number: str | None = Field(None, max_length=32)
    website: str | None = Field(None, max_length=1024)
    description: str | None = None
    calendar_key: str | None = Field(None, max_length=255)


class ShortBrandUrlRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=2048)


class ShortBrandUrl(BaseModel):
    short_url: str
