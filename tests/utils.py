import hmac
import hashlib

from apps.payments.gateway import PaymentOrder, RazorpayGateway
from apps.payments.utils import to_minor_units

TEST_KEY_ID = 'rzp_test_key'
TEST_KEY_SECRET = 'rzp_test_secret'


class FakeGateway(RazorpayGateway):
    """Gateway that records order requests instead of calling Razorpay."""

    def __init__(self, error=None):
        super().__init__(key_id=TEST_KEY_ID, key_secret=TEST_KEY_SECRET, base_url='https://api.razorpay.test/v1')
        self.error = error
        self.orders = []

    def create_order(self, job_id, amount, payer_email, payer_phone):
        self.orders.append({'job_id': job_id, 'amount': amount, 'email': payer_email, 'phone': payer_phone})
        if self.error is not None:
            raise self.error
        return PaymentOrder(
            order_id=f"order_test_{job_id}_{len(self.orders)}",
            amount=to_minor_units(amount),
            currency=self.currency,
            key_id=self.key_id,
        )


def sign(order_id, payment_id, secret=TEST_KEY_SECRET):
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()
