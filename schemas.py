from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

OrderStatus = Literal["pending", "processing", "completed", "cancelled"]
PaymentType = Literal["manual", "auto"]

# ----------------- Users / auth -----------------
class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

class UserLogin(BaseModel):
    email: str
    password: str

class Identity(BaseModel):
    """What a session token carries and what handlers receive."""
    id: int
    name: str
    email: str
    role: str = "user"

    model_config = {"from_attributes": True}

class AuthResponse(BaseModel):
    user: Identity
    token: str

class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

# ----------------- Categories -----------------
class CategoryBase(BaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    icon: str | None = None

class CategoryCreate(CategoryBase):
    pass

class CategoryResponse(CategoryBase):
    id: int
    model_config = {"from_attributes": True}

# ----------------- Products -----------------
class ProductBase(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    price: float = Field(gt=0)
    thumbnail: str | None = None
    file_url: str | None = None
    demo_url: str | None = None
    author_name: str | None = None
    category_id: int | None = None

class ProductCreate(ProductBase):
    pass

class ProductUpdate(ProductBase):
    pass

class ProductResponse(ProductBase):
    id: int
    sales_count: int = 0
    created_at: datetime | None = None
    category_name: str | None = None

    model_config = {"from_attributes": True}

# ----------------- Payment methods -----------------
class PaymentMethodBase(BaseModel):
    name: str = Field(min_length=1)
    type: PaymentType = "manual"
    account_number: str | None = None
    instructions: str | None = None
    active: bool = True

class PaymentMethodCreate(PaymentMethodBase):
    id: str = Field(min_length=1)
    api_key: str | None = None
    api_secret: str | None = None

class PaymentMethodUpdate(PaymentMethodBase):
    api_key: str | None = None
    api_secret: str | None = None

class PaymentMethodPublic(PaymentMethodBase):
    # no api_key / api_secret here
    id: str
    model_config = {"from_attributes": True}

class PaymentMethodAdmin(PaymentMethodPublic):
    api_key: str | None = None
    api_secret: str | None = None

# ----------------- Banners -----------------
class BannerBase(BaseModel):
    image_url: str = Field(min_length=1)
    title: str | None = None
    subtitle: str | None = None
    link: str | None = None
    active: bool = True

class BannerCreate(BannerBase):
    pass

class BannerResponse(BannerBase):
    id: int
    created_at: datetime | None = None
    model_config = {"from_attributes": True}

# ----------------- Checkout / orders -----------------
class CheckoutRequest(BaseModel):
    product_id: int = Field(alias="productId")
    payment_method: str = Field(alias="paymentMethod", min_length=1)
    transaction_id: str | None = Field(default=None, alias="transactionId")

    model_config = {"populate_by_name": True}

class CheckoutResponse(BaseModel):
    order_id: int = Field(alias="orderId")
    download_url: str | None = Field(default=None, alias="downloadUrl")

    model_config = {"populate_by_name": True}

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class OrderResponse(BaseModel):
    id: int
    user_id: int
    product_id: int
    amount: float
    status: str
    payment_method: str | None = None
    transaction_id: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

class UserOrderResponse(OrderResponse):
    title: str | None = None
    thumbnail: str | None = None
    file_url: str | None = None

class AdminOrderResponse(OrderResponse):
    user_name: str | None = None
    user_email: str | None = None
    product_title: str | None = None

# ----------------- Admin stats -----------------
class TrendPoint(BaseModel):
    date: str
    total: float

class CategoryCount(BaseModel):
    name: str
    value: int

class TopProduct(BaseModel):
    title: str
    sales_count: int

class AdminStats(BaseModel):
    revenue: float = 0
    orders: int = 0
    users: int = 0
    products: int = 0
    recentOrders: list[AdminOrderResponse] = []
    salesTrend: list[TrendPoint] = []
    recentUsers: list[UserSummary] = []
    categoryDistribution: list[CategoryCount] = []
    topProducts: list[TopProduct] = []
