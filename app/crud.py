# app/crud.py
from datetime import datetime
from sqlalchemy.orm import Session
from . import models, schemas
from .core.security import generate_salt, get_password_hash, verify_password


def get_customer_by_email(db: Session, email: str):
    return db.query(models.Customer).filter(models.Customer.email == email).first()


def get_customer_by_id(db: Session, customer_id: int):
    return db.get(models.Customer, customer_id)


def signup(db: Session, customer: schemas.CustomerCreate, otp: int, otp_expiry: datetime):
    salt = generate_salt()
    db_customer = models.Customer(
        email=customer.email.lower(),
        password=get_password_hash(customer.password, salt),
        salt=salt,
        phone=customer.phone,
        otp=otp,
        otp_expiry=otp_expiry,
        first_name="",
        last_name="",
        address="",
        verified=False,
        lat=0,
        lng=0
    )
    db.add(db_customer)
    db.commit()
    db.refresh(db_customer)
    return db_customer


def save(db: Session, customer: models.Customer):
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


def authenticate_customer(db: Session, email: str, password: str):
    # exact match: login does not lowercase the address the way signup does
    customer = get_customer_by_email(db, email=email)
    if not customer:
        return False
    if not verify_password(password, customer.password):
        return False
    return customer
