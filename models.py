from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

import config
from database import Base

ORDER_STATUSES = ("pending", "processing", "completed", "cancelled")


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    role = Column(String, nullable=False, default="user")  # user, admin
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    slug = Column(String, unique=True, nullable=False)
    icon = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    price = Column(Float, nullable=False)
    thumbnail = Column(String)
    file_url = Column(String)
    demo_url = Column(String)
    author_name = Column(String, default=config.PLATFORM_NAME)
    # no ON DELETE CASCADE: removing a category must leave its products alone
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    sales_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    amount = Column(Float, nullable=False)  # price snapshot, never re-read
    status = Column(String, nullable=False, default="pending")
    payment_method = Column(String)
    transaction_id = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PaymentMethod(Base):
    __tablename__ = "payment_methods"
    id = Column(String, primary_key=True)  # slug, e.g. "bkash"
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, default="manual")  # manual, auto
    account_number = Column(String)
    instructions = Column(Text)
    api_key = Column(String)
    api_secret = Column(String)
    active = Column(Boolean, nullable=False, default=True)


class Setting(Base):
    __tablename__ = "settings"
    key = Column(String, primary_key=True)
    value = Column(Text)


class Banner(Base):
    __tablename__ = "banners"
    id = Column(Integer, primary_key=True, index=True)
    image_url = Column(String, nullable=False)
    title = Column(String)
    subtitle = Column(String)
    link = Column(String)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
