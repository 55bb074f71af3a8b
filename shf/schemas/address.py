from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Visibility = Literal["street_address", "post_code", "city", "kommun", "none"]


class Region(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class Address(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    street_address: str | None = None
    post_code: str | None = None
    city: str | None = None
    country: str
    region_id: int | None = None
    kommun_id: int | None = None
    region: Region | None = None
    visibility: Visibility
    mail: bool


class AddressCreate(BaseModel):
    street_address: str | None = Field(None, max_length=255)
    post_code: str | None = Field(None, max_length=16)
    city: str | None = Field(None, max_length=255)
    country: str = Field("Sverige", max_length=255)
    region_id: int | None = None
    kommun_id: int | None = None
    visibility: Visibility = "street_address"
    mail: bool = False
