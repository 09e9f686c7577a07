import logging
from dataclasses import dataclass

import requests
from django.conf import settings

from .exceptions import PaymentGatewayError
from .utils import to_minor_units, verify_payment_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentOrder:
    """A gateway order as relayed to the client-side checkout."""
    order_id: str
    amount: int
    currency: str
    key_id: str


class RazorpayGateway:
    def __init__(self, key_id, key_secret, base_url, currency='INR', timeout=10):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip('/')
        self.currency = currency
        self.timeout = timeout

    @classmethod
    def from_settings(cls):
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_BASE_URL,
            currency=settings.RAZORPAY_CURRENCY,
            timeout=settings.RAZORPAY_TIMEOUT,
        )

    def checkout(self, order_id, amount):
        """Checkout descriptor for an order, amount given in rupees."""
        return PaymentOrder(
            order_id=order_id,
            amount=to_minor_units(amount),
            currency=self.currency,
            key_id=self.key_id,
        )

    def create_order(self, job_id, amount, payer_email, payer_phone):
        """
        Create a Razorpay order for a job payment.

        `amount` is in rupees and is sent in paise. Any failure, including a
        timeout, is raised as PaymentGatewayError.
        """
        if not self.key_id or not self.key_secret:
            logger.error("Razorpay credentials not configured")
            raise PaymentGatewayError("Payment gateway is not configured")

        payload = {
            'amount': to_minor_units(amount),
            'currency': self.currency,
            'receipt': f"job_{job_id}",
            'notes': {
                'jobId': str(job_id),
                'customerEmail': payer_email or '',
                'customerPhone': payer_phone or '',
                'description': 'Job completion payment',
            },
        }
        try:
            logger.info(f"Creating Razorpay order for job {job_id}: {payload['amount']} {self.currency}")
            response = requests.post(
                f"{self.base_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            logger.error(f"Razorpay order creation timed out for job {job_id}")
            raise PaymentGatewayError("Payment gateway timed out")
        except requests.exceptions.HTTPError as e:
            logger.error(f"Razorpay HTTP error for job {job_id}: {str(e)}, Response: {response.text}")
            raise PaymentGatewayError()
        except requests.exceptions.RequestException as e:
            logger.error(f"Razorpay request failed for job {job_id}: {str(e)}")
            raise PaymentGatewayError()
        except ValueError as e:
            logger.error(f"Razorpay returned an unreadable response for job {job_id}: {str(e)}")
            raise PaymentGatewayError()

        order_id = data.get('id') if isinstance(data, dict) else None
        if not order_id:
            logger.error(f"Razorpay order response missing id for job {job_id}: {data}")
            raise PaymentGatewayError()

        logger.info(f"Razorpay order {order_id} created for job {job_id}")
        return PaymentOrder(
            order_id=order_id,
            amount=data.get('amount', payload['amount']),
            currency=data.get('currency', self.currency),
            key_id=self.key_id,
        )

    def verify_signature(self, order_id, payment_id, signature):
        return verify_payment_signature(order_id, payment_id, signature, key_secret=self.key_secret)


def get_payment_gateway():
    return RazorpayGateway.from_settings()
