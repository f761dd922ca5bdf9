from rest_framework import status
from rest_framework.exceptions import APIException


class InvalidDateRange(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid date range.'
    default_code = 'invalid_date_range'


class StoreUnavailable(APIException):
    """The database could not be read; the underlying error is chained as __cause__"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Order and expense records are temporarily unavailable.'
    default_code = 'store_unavailable'
