# app/models.py
from sqlalchemy import Boolean, Column, Integer, String, DateTime, Float
from .database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    salt = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    otp = Column(Integer, nullable=True)
    otp_expiry = Column(DateTime(timezone=True), nullable=True)
    verified = Column(Boolean, default=False, nullable=False)
    first_name = Column(String, default="", nullable=False)
    last_name = Column(String, default="", nullable=False)
    address = Column(String, default="", nullable=False)
    lat = Column(Float, default=0, nullable=False)
    lng = Column(Float, default=0, nullable=False)
