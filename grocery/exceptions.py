"""Errors raised by the storefront services.

Each error carries the HTTP status the API reports it with, so views can
surface any of them directly to the caller.
"""


class StoreError(Exception):
    status = 400

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def as_dict(self):
        body = {'message': self.message}
        if self.errors:
            body['errors'] = self.errors
        return body


class ValidationFailed(StoreError):
    status = 400


class AuthenticationFailed(StoreError):
    status = 401


class PermissionDenied(StoreError):
    status = 403


class NotFound(StoreError):
    status = 404


class Conflict(StoreError):
    status = 409


class InsufficientStock(Conflict):

    def __init__(self, product_name, available):
        super().__init__(f"Insufficient stock for {product_name}. Available: {available}")
        self.product_name = product_name
        self.available = available


class PayloadTooLarge(StoreError):
    status = 413


class TooManyRequests(StoreError):
    status = 429
