from rest_framework import status
from rest_framework.exceptions import APIException


class PaymentGatewayError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Failed to create payment order'
    default_code = 'payment_gateway_error'


class InvalidPaymentSignature(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Payment signature verification failed'
    default_code = 'invalid_signature'
