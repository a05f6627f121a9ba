from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    event: Any = Field(..., description="Event type tag")
    data: Any = Field(..., description="Event payload, shape depends on the tag")
    fired_at: Any = Field(None, alias="firedAt")

    @field_validator("event", "data")
    @classmethod
    def present(cls, value, info):
        if value is None or value == "":
            raise ValueError(f"{info.field_name} is required")
        return value


# Payload shapes as delivered by the platform. Every key is optional and
# formatters read them through ``pluck`` so absent keys never raise.


class Person(TypedDict, total=False):
    firstName: str
    lastName: str
    email: str


class PricingOption(TypedDict, total=False):
    name: str
    remainingVisits: int


class VisitRecord(TypedDict, total=False):
    client: Person
    service: dict[str, Any]
    startsAt: str
    status: int
    pricingOption: PricingOption
    isWaitingList: bool
    waitingListPosition: int


class PurchaseItem(TypedDict, total=False):
    name: str
    price: int
    currency: str


class Purchase(TypedDict, total=False):
    totalPrice: int
    currency: str
    discountAmount: int
    items: list[PurchaseItem]


class PaymentRecord(TypedDict, total=False):
    user: Person
    orderId: str
    paymentGateway: str
    orderStatus: int
    purchase: Purchase


class Agreements(TypedDict, total=False):
    termsOfUse: bool
    privacyPolicy: bool
    newsletter: bool


class ClientDetails(Person, total=False):
    uuid: str
    phone: dict[str, str]
    agreements: Agreements


class ClientRecord(TypedDict, total=False):
    client: ClientDetails
