from __future__ import annotations
from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Annotated, Union


def _check_email_shape(value: str) -> str:
    # validates only; the address is looked up exactly as typed
    validate_email(value, check_deliverability=False)
    return value


RawEmail = Annotated[str, AfterValidator(_check_email_shape)]


class CustomerCreate(BaseModel):
    email: EmailStr
    phone: str = Field(min_length=1, max_length=12)
    password: str = Field(min_length=1, max_length=12)


class CustomerLogin(BaseModel):
    email: RawEmail
    password: str = Field(min_length=1, max_length=12)


class CustomerEdit(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str = Field(max_length=16)
    last_name: str = Field(max_length=16)
    address: str = Field(max_length=16)


class VerifyOTP(BaseModel):
    otp: Union[int, str]


class Signature(BaseModel):
    signature: str
    verified: bool
    email: str


class Message(BaseModel):
    message: str


class TokenData(BaseModel):
    id: int
    email: str
    verified: bool = False


class Customer(BaseModel):
    """Public view of a customer; credentials and OTP state stay server side."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    email: str
    phone: str
    verified: bool
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    lat: float = 0
    lng: float = 0
