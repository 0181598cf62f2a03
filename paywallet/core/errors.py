"""
Error taxonomy for wallet operations.

Every error raised deliberately by the services derives from WalletError and
carries a category plus the HTTP status the API layer should answer with.
Anything else reaching the API is treated as an unexpected fault.
"""

import enum


class ErrorCategory(enum.Enum):
    """Caller-visible error categories"""
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"


class WalletError(Exception):
    """Base exception for expected, caller-recoverable failures"""

    category = ErrorCategory.BUSINESS_RULE
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(WalletError):
    """Missing wallet, offer, user or transaction"""
    category = ErrorCategory.NOT_FOUND
    status_code = 404


class UnauthorizedError(WalletError):
    """Caller does not own the resource and is not an admin"""
    category = ErrorCategory.UNAUTHORIZED
    status_code = 403


class ValidationError(WalletError):
    """Malformed or missing input fields"""
    category = ErrorCategory.VALIDATION
    status_code = 422


class BusinessRuleError(WalletError):
    """Domain policy violation"""
    category = ErrorCategory.BUSINESS_RULE
    status_code = 400


class InsufficientBalanceError(BusinessRuleError):
    """Debit exceeds the available balance"""
    pass


class OfferLimitExceededError(BusinessRuleError):
    """Debit exceeds the linked offer's per-transaction spending limit"""
    pass
