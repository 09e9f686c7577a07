from rest_framework import status
from rest_framework.exceptions import APIException


class Unauthenticated(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Unauthorized'
    default_code = 'unauthenticated'


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Job not found'
    default_code = 'not_found'


class InvalidAction(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid action'
    default_code = 'invalid_action'


class Forbidden(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Not authorized to perform this action on the job'
    default_code = 'forbidden'


class InvalidState(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Job is not in a valid state for this action'
    default_code = 'invalid_state'


class AntiFraudBlock(InvalidState):
    default_detail = 'Cannot cancel in-progress jobs - work has started'
    default_code = 'anti_fraud_block'


class MissingProof(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Photo and GPS location are required to start the job'
    default_code = 'missing_proof'


class InvalidProof(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Proof of work is invalid'
    default_code = 'invalid_proof'


class AlreadyReviewed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This job has already been reviewed'
    default_code = 'already_reviewed'
