from pydantic import BaseModel, Field
from typing import List
from datetime import datetime
from decimal import Decimal
from epharmacy.models.order import OrderStatus


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int


class OrderCreate(BaseModel):
    items: List[OrderItemCreate] = []
    
    delivery_address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    province: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)

    class Config:
        str_strip_whitespace = True


class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderListItem(BaseModel):
    id: int
    user_id: int
    user_name: str
    user_username: str
    order_date: datetime
    status: OrderStatus
    total_price: Decimal
    item_count: int
    city: str
    province: str


class OrderResponse(OrderListItem):
    delivery_address: str
    postal_code: str
    phone_number: str
    items: List[OrderItemResponse] = []


class OrderCreatedResponse(BaseModel):
    id: int
    total_price: Decimal
    status: OrderStatus


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class TopProduct(BaseModel):
    product_id: int
    product_name: str
    order_count: int
    total_quantity: int
    total_revenue: Decimal
