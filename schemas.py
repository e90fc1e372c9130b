# file: schemas.py

from typing import Annotated, List, Optional  # types

from pydantic import BaseModel, ConfigDict, Field, StringConstraints  # DTOs

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]  # required text


class RequestBody(BaseModel):  # base: unknown fields rejected, camelCase or snake_case accepted
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


# -------------------- Auth --------------------

class SendCodeRequest(RequestBody):
    email: NonEmptyStr = Field(..., description="login email")


class VerifyCodeRequest(RequestBody):
    email: NonEmptyStr = Field(..., description="login email")
    code: NonEmptyStr = Field(..., description="6-digit code")


class ProfileUpdate(RequestBody):
    name: NonEmptyStr = Field(..., description="display name")
    phone_number: NonEmptyStr = Field(..., description="phone")


# -------------------- Orders --------------------

class Location(RequestBody):  # both or neither
    lat: float
    lng: float


class OrderCreate(RequestBody):
    customer_name: Optional[str] = Field(None, alias="customerName")
    address: NonEmptyStr
    location: Optional[Location] = None
    cylinder_type: NonEmptyStr = Field(..., alias="cylinderType")
    filled: Optional[bool] = None
    unique_code: Optional[str] = Field(None, alias="uniqueCode")  # customer tracking code
    status: Optional[str] = None
    date: Optional[str] = None
    amount_paid: Optional[float] = Field(None, alias="amountPaid")
    notes: Optional[str] = None
    payment: NonEmptyStr = Field(..., description="payment method")
    service_type: Optional[str] = Field(None, alias="serviceType")
    time_slot: Optional[str] = Field(None, alias="timeSlot")
    delivery_window: Optional[str] = Field(None, alias="deliveryWindow")


class OrderCheckRequest(RequestBody):
    email: NonEmptyStr
    unique_code: NonEmptyStr = Field(..., alias="uniqueCode")


class OrderStatusUpdate(RequestBody):  # incomplete items are skipped, not rejected
    order_id: Optional[str] = Field(None, alias="orderId")
    status: Optional[str] = None
    failed_note: Optional[str] = Field(None, alias="failedNote")


class BatchUpdateRequest(RequestBody):
    updates: List[OrderStatusUpdate] = Field(..., min_length=1)


# -------------------- Assignment --------------------

class AssignClusterRequest(RequestBody):
    driver_email: NonEmptyStr
    order_ids: List[NonEmptyStr] = Field(..., min_length=1)
