from typing import Optional

from fastapi import APIRouter, Depends, BackgroundTasks, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import schemas, crud
from ..core.config import settings
from ..core.dependencies import get_current_customer
from ..core.exceptions import AuthError, ConflictError, GenericError, VerificationError
from ..core.logging_config import get_logger
from ..core.security import generate_signature
from ..database import get_db
from ..utils import generate_otp, otp_is_current, send_otp_sms

logger = get_logger("customer_api.customers")

router = APIRouter()


def set_auth_cookie(response: Response, signature: str):
    response.set_cookie(
        key="token",
        value=f"Bearer {signature}",
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        expires=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
        secure=False
    )


@router.post("/signup", response_model=schemas.Signature, status_code=status.HTTP_201_CREATED)
def customer_signup(
        customer_in: schemas.CustomerCreate,
        response: Response,
        background_tasks: BackgroundTasks,
        db: Session = Depends(get_db)
):
    try:
        if crud.get_customer_by_email(db, email=customer_in.email.lower()):
            raise ConflictError("This email address is already in use!")

        otp, expiry = generate_otp()
        try:
            customer = crud.signup(db, customer=customer_in, otp=otp, otp_expiry=expiry)
        except IntegrityError:
            db.rollback()
            logger.warning("Signup for %s lost a uniqueness race", customer_in.email.lower())
            raise GenericError("Error while signing up!")

        background_tasks.add_task(send_otp_sms, otp, customer.phone)

        signature = generate_signature(customer)
        set_auth_cookie(response, signature)
        logger.info("Customer %s signed up", customer.id)

        return {
            "signature": signature,
            "verified": customer.verified,
            "email": customer.email
        }
    except (ConflictError, GenericError):
        raise
    except Exception as e:
        logger.error("Signup failed: %s", e)
        db.rollback()
        raise


@router.post("/login", response_model=schemas.Signature)
def customer_login(
        login_in: schemas.CustomerLogin,
        response: Response,
        db: Session = Depends(get_db)
):
    customer = crud.authenticate_customer(db, email=login_in.email, password=login_in.password)
    if not customer:
        logger.info("Failed login attempt")
        raise AuthError("Invalid credentials!")

    signature = generate_signature(customer)
    set_auth_cookie(response, signature)

    return {
        "signature": signature,
        "email": customer.email,
        "verified": customer.verified
    }


@router.patch("/verify", response_model=schemas.Signature)
def customer_verify(
        data: schemas.VerifyOTP,
        response: Response,
        current: Optional[schemas.TokenData] = Depends(get_current_customer),
        db: Session = Depends(get_db)
):
    try:
        if current is None:
            raise AuthError("OPT verification failed!")

        profile = crud.get_customer_by_id(db, current.id)
        if profile is None:
            raise AuthError("OPT verification failed!")

        try:
            otp = int(str(data.otp).strip())
        except ValueError:
            otp = None

        if otp is None or profile.otp != otp or not otp_is_current(profile.otp_expiry):
            logger.info("OTP verification failed for customer %s", profile.id)
            raise VerificationError("OPT verification failed!")

        profile.verified = True
        profile.otp = None
        profile.otp_expiry = None
        profile = crud.save(db, profile)

        signature = generate_signature(profile)
        set_auth_cookie(response, signature)
        logger.info("Customer %s verified", profile.id)

        return {
            "signature": signature,
            "verified": profile.verified,
            "email": profile.email
        }
    except (AuthError, VerificationError):
        raise
    except Exception as e:
        logger.error("OTP verification errored: %s", e)
        db.rollback()
        raise


@router.get("/otp", response_model=schemas.Message)
def request_otp(
        background_tasks: BackgroundTasks,
        current: Optional[schemas.TokenData] = Depends(get_current_customer),
        db: Session = Depends(get_db)
):
    profile = crud.get_customer_by_id(db, current.id) if current else None
    if profile is None:
        raise GenericError("Error generating OTP!")

    otp, expiry = generate_otp()
    profile.otp = otp
    profile.otp_expiry = expiry
    crud.save(db, profile)

    background_tasks.add_task(send_otp_sms, otp, profile.phone)
    logger.info("New OTP issued for customer %s", profile.id)
    return {"message": "OTP sent to your registered phone number."}


@router.get("/profile", response_model=schemas.Customer)
def get_customer_profile(
        current: Optional[schemas.TokenData] = Depends(get_current_customer),
        db: Session = Depends(get_db)
):
    profile = crud.get_customer_by_id(db, current.id) if current else None
    if profile is None:
        raise GenericError("Error getting user profile!")
    return profile


@router.patch("/profile", response_model=schemas.Customer)
def update_customer_profile(
        data: schemas.CustomerEdit,
        current: Optional[schemas.TokenData] = Depends(get_current_customer),
        db: Session = Depends(get_db)
):
    profile = crud.get_customer_by_id(db, current.id) if current else None
    if profile is None:
        raise GenericError("Error updating profile!")

    profile.first_name = data.first_name
    profile.last_name = data.last_name
    profile.address = data.address

    return crud.save(db, profile)
