import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, OperationalError
from rest_framework.exceptions import NotFound

from authentication.exceptions import custom_exception_handler
from finance.exceptions import InvalidDateRange, StoreUnavailable


def handle(exc):
    return custom_exception_handler(exc, {})


def test_drf_errors_are_wrapped():
    response = handle(NotFound())

    assert response.status_code == 404
    assert response.data == {
        'error': True,
        'message': 'Resource not found',
        'details': {'detail': 'Not found.'},
        'status_code': 404,
    }


def test_invalid_date_range_is_a_validation_error():
    response = handle(InvalidDateRange('Start date must not be after end date.'))

    assert response.status_code == 400
    assert response.data['message'] == 'Validation error'
    assert response.data['details'] == {'detail': 'Start date must not be after end date.'}


def test_store_unavailable_is_logged_with_its_cause(caplog):
    try:
        try:
            raise OperationalError('database is locked')
        except OperationalError as cause:
            raise StoreUnavailable() from cause
    except StoreUnavailable as exc:
        with caplog.at_level(logging.ERROR):
            response = handle(exc)

    assert response.status_code == 503
    assert response.data['message'] == 'Record store unavailable'
    assert 'database is locked' in caplog.text


def test_model_validation_errors_keep_their_fields():
    response = handle(ValidationError({'amount': ['Amount must be greater than zero.']}))

    assert response.status_code == 400
    assert response.data['details'] == {'amount': ['Amount must be greater than zero.']}


def test_integrity_errors_are_bad_requests():
    response = handle(IntegrityError('UNIQUE constraint failed'))

    assert response.status_code == 400
    assert response.data['message'] == 'Database integrity error'


def test_other_database_errors_mean_store_unavailable():
    response = handle(OperationalError('no such table: orders'))

    assert response.status_code == 503
    assert response.data['message'] == 'Record store unavailable'


def test_anything_else_is_a_server_error():
    response = handle(RuntimeError('boom'))

    assert response.status_code == 500
    assert response.data['message'] == 'An unexpected error occurred'
