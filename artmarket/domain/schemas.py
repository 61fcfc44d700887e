# artmarket/domain/schemas.py
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artmarket.utils.sanitize import escape_markup


class SanitizedIn(BaseModel):
    """Baza dla wszystkich schematow wejsciowych - escapuje markup w stringach."""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _escape_markup(cls, value):
        return escape_markup(value)


class OutModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ----- users -----

class UserCreate(SanitizedIn):
    """Rejestracja uzytkownika, pola w formacie frontu."""

    user_id: str | None = Field(None, alias="UserId")
    full_name: str | None = Field(None, alias="fullName")
    email: str | None = Field(None, alias="Email")
    image_url: str | None = Field(None, alias="imageurl")
    username: str | None = None


class UserOut(OutModel):
    id: int
    user_id: str = Field(..., alias="UserId")
    full_name: str = Field(..., alias="fullName")
    email: str = Field(..., alias="Email")
    image_url: str = Field(..., alias="imageurl")
    username: str


# ----- listings -----

class ListingIn(SanitizedIn):
    """
    Pola ogloszenia (create i update).
    images to lista URL-i - uzywana tylko przy update bez plikow.
    """

    category: str | None = None
    title: str | None = None
    description: str | None = None
    price: float | None = None
    user_id: str | None = Field(None, alias="userId")
    images: List[str] | None = None


class ListingOut(OutModel):
    id: str
    category: str
    title: str
    description: str
    price: float
    images: List[str]
    user_id: str = Field(..., alias="userId")


class ListingWithUserOut(ListingOut):
    user: UserOut


# ----- cart -----

class CartItemIn(SanitizedIn):
    user_id: str | None = Field(None, alias="userId")
    art_id: str | None = Field(None, alias="artId")
    title: str | None = None
    price: float | None = None
    image: str | None = None


class CartItemOut(OutModel):
    art_id: str = Field(..., alias="artId")
    title: str
    price: float
    image: str


class CartOut(OutModel):
    id: int
    user_id: str = Field(..., alias="userId")
    items: List[CartItemOut]


class CartPair(SanitizedIn):
    user_id: str | None = Field(None, alias="userId")
    art_id: str | None = Field(None, alias="artId")


class CartBatchDeleteIn(SanitizedIn):
    cart_items: List[CartPair] = Field(default_factory=list, alias="cartItems")

    @field_validator("cart_items", mode="before")
    @classmethod
    def _single_pair_as_list(cls, value):
        # stary front wysylal pojedynczy obiekt zamiast listy
        if isinstance(value, dict):
            return [value]
        return value


class CartRemovalResult(OutModel):
    user_id: str | None = Field(None, alias="userId")
    art_id: str | None = Field(None, alias="artId")
    removed: bool
    detail: str


class CartBatchDeleteOut(BaseModel):
    message: str
    results: List[CartRemovalResult]


# ----- orders / email -----

class OrderCreate(SanitizedIn):
    amount: float = Field(..., gt=0, description="Kwota w glownej jednostce waluty")
    currency: str = Field("INR", min_length=3, max_length=3)
    receipt: str | None = None


class ReferralEmails(SanitizedIn):
    referrer_email: str = Field(..., min_length=3, alias="referrerEmail")
    referee_email: str = Field(..., min_length=3, alias="refereeEmail")


class SendEmailIn(SanitizedIn):
    email: ReferralEmails


class MessageOut(BaseModel):
    message: str
