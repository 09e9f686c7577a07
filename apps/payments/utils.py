import hmac
import hashlib
import logging
from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def to_minor_units(amount):
    """Convert a rupee amount to paise, the unit Razorpay expects."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def calculate_fees(charge, percentage=None):
    """
    Split a job charge into the platform fee and the worker's earnings.

    Both values are rounded to 2 decimal places.
    """
    if percentage is None:
        percentage = settings.PLATFORM_FEE_PERCENTAGE
    charge = Decimal(str(charge))
    platform_fee = (charge * Decimal(percentage) / 100).quantize(CENT, rounding=ROUND_HALF_UP)
    worker_earnings = (charge - platform_fee).quantize(CENT, rounding=ROUND_HALF_UP)
    return platform_fee, worker_earnings


def verify_payment_signature(order_id, payment_id, signature, key_secret=None):
    """Check the checkout signature Razorpay returns after a successful payment."""
    if not (order_id and payment_id and isinstance(signature, str) and signature):
        return False
    secret = key_secret if key_secret is not None else settings.RAZORPAY_KEY_SECRET
    if not secret:
        logger.error(f"Razorpay key secret not configured, rejecting payment signature for order {order_id}")
        return False
    computed_signature = hmac.new(
        secret.encode('utf-8'),
        f"{order_id}|{payment_id}".encode('utf-8'),
        hashlib.sha256
    ).hexdigest()
    if not hmac.compare_digest(computed_signature.encode('utf-8'), signature.encode('utf-8')):
        logger.error(f"Invalid payment signature for order {order_id}")
        return False
    return True
