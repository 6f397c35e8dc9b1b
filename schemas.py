"""
Database Schemas

Pydantic models for the records kept in the JSON store files.
Each model maps to one file: the lowercased, pluralised class name
(Product -> products.json). Field names match the JSON wire format.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, EmailStr, model_validator


class PaymentMethod(str, Enum):
    COD = "COD"
    BKASH = "bKash"
    NAGAD = "Nagad"
    CREDIT_CARD = "Credit Card"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Product(BaseModel):
    id: int
    name: str = Field(..., min_length=1)
    description: str = ""
    price: int = Field(..., ge=0, description="Price in Taka")
    category: str = Field(..., description="Category slug")
    image: str = ""
    sizes: List[str] = Field(default_factory=list)
    hasSizes: bool = False
    stock: int = Field(0, ge=0)
    rating: float = Field(default=0, ge=0, le=5)
    reviews: int = Field(0, ge=0)
    details: Optional[str] = None

    @model_validator(mode="after")
    def _sync_has_sizes(self):
        self.hasSizes = bool(self.sizes)
        return self


class Category(BaseModel):
    id: int
    name: str = Field(..., min_length=1, description="Unique slug")
    displayName: str
    isActive: bool = True


class OrderSummary(BaseModel):
    orderId: str
    date: str
    total: int
    status: OrderStatus = OrderStatus.PENDING


class User(BaseModel):
    id: str
    firstName: str
    lastName: str
    email: EmailStr
    passwordHash: str = Field(..., description="BCrypt hashed password")
    phone: str = ""
    role: str = Field("customer", description="Role: customer | admin")
    createdAt: str
    lastLogin: Optional[str] = None
    orders: List[OrderSummary] = Field(default_factory=list)


class Customer(BaseModel):
    id: Optional[str] = None
    firstName: str = ""
    lastName: str = ""
    email: Optional[str] = None


class ShippingAddress(BaseModel):
    address: str = ""
    phone: str = ""
    city: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = None


class OrderItem(BaseModel):
    """Snapshot of a cart line at the time the order was placed."""
    id: int
    name: str
    size: str = "Standard"
    quantity: int = Field(..., ge=1)
    price: int = Field(..., ge=0)
    category: str = ""


class Order(BaseModel):
    id: str
    customer: Customer
    shippingAddress: ShippingAddress
    shippingPhone: Optional[str] = None
    items: List[OrderItem]
    paymentMethod: PaymentMethod
    subtotal: int
    shippingFee: int
    totalAmount: int
    status: OrderStatus = OrderStatus.PENDING
    orderDate: str
    updatedAt: str
