"""User models for the storefront"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ShippingProfile(BaseModel):
    """Saved shipping details; every field may be unset"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    country: Optional[str] = None


class User(BaseModel):
    """Storefront user mirrored from the identity provider"""
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    shipping: ShippingProfile = Field(default_factory=ShippingProfile)
    created_at: datetime
    updated_at: datetime


class ShippingResponse(ShippingProfile):
    """Saved shipping details plus the account email"""
    email: Optional[str] = None
