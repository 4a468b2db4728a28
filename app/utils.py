import os
import secrets
from datetime import datetime, timedelta, timezone
from jinja2 import Environment, FileSystemLoader
from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException
from app.core.config import settings
from app.core.logging_config import get_logger

logger = get_logger("customer_api.sms")

template_dir = os.path.join(os.path.dirname(__file__), 'sms_templates')
env = Environment(loader=FileSystemLoader(template_dir))


def generate_otp():
    """Return a 6-digit code and the moment it stops being accepted."""
    otp = 100000 + secrets.randbelow(900000)
    expiry = datetime.now(timezone.utc) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)
    return otp, expiry


def otp_is_current(expiry) -> bool:
    if expiry is None:
        return False
    # SQLite hands back naive datetimes; they were written in UTC
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry >= datetime.now(timezone.utc)


def get_sms_client():
    if not settings.TWILIO_ACCOUNT_SID or not settings.TWILIO_AUTH_TOKEN:
        return None
    return Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)


def format_phone_number(phone: str) -> str:
    phone = phone.strip()
    if phone.startswith("+"):
        return phone
    return f"{settings.SMS_COUNTRY_CODE}{phone}"


def send_sms(to_phone: str, template_name: str, context: dict):
    client = get_sms_client()
    if client is None:
        logger.warning("Twilio is not configured, SMS to %s not sent", to_phone)
        return False

    try:
        template = env.get_template(template_name)
        body = template.render(context).strip()

        message = client.messages.create(
            body=body,
            from_=settings.TWILIO_FROM_NUMBER,
            to=format_phone_number(to_phone),
        )
        logger.info("SMS %s queued for %s", message.sid, to_phone)
        return True
    except TwilioRestException as e:
        logger.error("Failed to send SMS to %s: %s", to_phone, e)
        return False


def send_otp_sms(otp: int, to_phone: str):
    return send_sms(
        to_phone=to_phone,
        template_name="otp.txt",
        context={"otp": otp}
    )
