from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .statuses import PaymentType, UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    phone: str = Field(min_length=1, max_length=32)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=1, max_length=128)
    role: UserRole = UserRole.CUSTOMER


class GuestUserIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    phone: str = Field(min_length=1, max_length=32)
    email: Optional[EmailStr] = None


class LoginIn(BaseModel):
    phone: str
    password: str


class UserOut(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str] = None
    role: UserRole

    class Config:
        from_attributes = True


class MenuItemBase(BaseModel):
    name: str
    description: str
    price: int = Field(ge=0)
    category: str
    image_url: str
    available: bool = True


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemOut(MenuItemBase):
    id: int

    class Config:
        from_attributes = True


class OrderItemIn(BaseModel):
    menu_item_id: int
    quantity: int = Field(default=1, ge=1)
    notes: str = Field(default="", max_length=500)


class OrderCreate(BaseModel):
    user_id: Optional[int] = None
    items: List[OrderItemIn]
    pickup_time: str = Field(pattern=r"^([01]?\d|2[0-3]):[0-5]\d$")
    special_instructions: Optional[str] = Field(default=None, max_length=1000)


class OrderOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    status: str
    items: List[OrderItemIn]
    total: int
    pickup_time: str
    special_instructions: Optional[str] = None
    payment_status: str
    created_at: datetime


class KitchenOrderOut(OrderOut):
    next_status: Optional[str] = None


class KitchenBoard(BaseModel):
    active: List[KitchenOrderOut]
    completed: List[OrderOut]


class StatusUpdate(BaseModel):
    status: str = Field(min_length=1)


class PaymentIn(BaseModel):
    card_number: str = Field(pattern=r"^\d{16}$")
    expiry_date: str = Field(pattern=r"^(0[1-9]|1[0-2])/\d{2}$")
    cvv: str = Field(pattern=r"^\d{3,4}$")
    payment_method: str = "card"

    @field_validator("card_number", mode="before")
    @classmethod
    def strip_spaces(cls, value):
        if isinstance(value, str):
            return value.replace(" ", "")
        return value


class PaymentOut(BaseModel):
    success: bool
    order_id: int
    amount: int
    payment_type: PaymentType
    payment_status: str


class PaymentRecordOut(BaseModel):
    id: int
    order_id: int
    amount: int
    status: str
    payment_method: str
    payment_type: str
    created_at: datetime

    class Config:
        from_attributes = True


class PopularItemOut(BaseModel):
    id: int
    name: str
    quantity: int
    total_amount: int


class TimeSlotOut(BaseModel):
    time_slot: str
    order_count: int


class NotificationOut(BaseModel):
    id: int
    user_id: int
    order_id: int
    type: str
    message: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
