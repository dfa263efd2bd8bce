from sqlalchemy import Boolean, Column, Date, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from .db import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    email_address = Column(String(255), unique=True, index=True, nullable=False)  # 一律存小寫
    first_name = Column(String(64), nullable=False)
    last_name = Column(String(64), nullable=False)
    password = Column(String(255), nullable=False)

class Restaurant(Base):
    __tablename__ = "restaurants"
    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(128), nullable=False)
    address = Column(Text)
    phone = Column(String(32))
    email = Column(String(255))
    website = Column(String(255))
    notes = Column(Text)

class RestaurantUser(Base):
    __tablename__ = "restaurants_users"
    # id only keeps insertion order for listings
    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_owner = Column(Boolean, nullable=False, default=False)
    __table_args__ = (
        UniqueConstraint("restaurant_id", "user_id", name="uq_restaurants_users_pair"),
        Index("ix_restaurants_users_user", "user_id"),
    )

class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(64), nullable=False)
    notes = Column(Text)

class Invoice(Base):
    __tablename__ = "invoices"
    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    invoice = Column(String(64), nullable=False)  # 廠商開立的單號
    vendor = Column(String(128), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text)
    __table_args__ = (
        UniqueConstraint("restaurant_id", "vendor", "invoice", name="uq_invoices_vendor_no"),
        Index("ix_invoices_restaurant_date", "restaurant_id", "date"),
    )

class Expense(Base):
    __tablename__ = "expenses"
    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text)
