# file: models.py

import enum  # role enum

from sqlalchemy import (  # columns
    Column, Integer, BigInteger, String, Float, Boolean, DateTime, JSON,
    Index, UniqueConstraint,
)

from database import Base  # table base


class Role(str, enum.Enum):  # closed set of roles
    customer = "customer"
    driver = "driver"
    admin = "admin"


class UserTable(Base):  # users
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)  # case-sensitive
    name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    role = Column(String, nullable=False, default=Role.customer.value, index=True)


class LoginCodeTable(Base):  # one live code per email
    __tablename__ = "login_codes"
    email = Column(String, primary_key=True)
    code = Column(String, nullable=False)
    expires = Column(BigInteger, nullable=False)  # epoch ms


class OrderTable(Base):  # orders
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, index=True)  # storage key
    order_id = Column(String, unique=True, index=True, nullable=False)  # short public id
    email = Column(String, index=True, nullable=False)  # owner
    customer_name = Column(String, nullable=True)
    address = Column(String, nullable=False)
    location_lat = Column(Float, nullable=True)
    location_lng = Column(Float, nullable=True)
    cylinder_type = Column(String, nullable=False)
    filled = Column(Boolean, nullable=True)
    unique_code = Column(String, nullable=True, index=True)  # customer tracking code
    status = Column(String, nullable=False, default="pending")
    date = Column(String, nullable=True)  # ISO string from client
    amount_paid = Column(Float, nullable=True)
    notes = Column(String, nullable=True)
    payment_method = Column(String, nullable=False)
    service_type = Column(String, nullable=True)
    time_slot = Column(String, nullable=True)
    delivery_window = Column(String, nullable=True)
    driver_email = Column(String, nullable=True, index=True)
    failed_note = Column(String, nullable=True)
    __table_args__ = (
        Index("ix_orders_email_unique_code", "email", "unique_code"),
    )


class ClusterAssignmentTable(Base):  # assignment history
    __tablename__ = "assigned_clusters"
    id = Column(Integer, primary_key=True, index=True)
    driver_email = Column(String, index=True, nullable=False)
    order_ids = Column(JSON, nullable=False)  # ids as submitted
    order_key = Column(String, nullable=False)  # canonical order set
    created_at = Column(DateTime(timezone=True), nullable=False)
    __table_args__ = (
        UniqueConstraint("driver_email", "order_key", name="uq_driver_order_set"),
    )


class SessionTable(Base):  # server-side sessions
    __tablename__ = "sessions"
    token_hash = Column(String, primary_key=True)  # sha256 of cookie token
    email = Column(String, index=True, nullable=False)
    role = Column(String, nullable=False)
    created_at = Column(BigInteger, nullable=False)  # epoch ms
    expires_at = Column(BigInteger, nullable=False, index=True)  # epoch ms
