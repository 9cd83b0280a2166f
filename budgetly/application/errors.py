"""
Application-level errors shared by the use cases
"""


class LedgerValidationError(ValueError):
    """Input rejected before any store mutation"""
    pass


class NotAuthenticatedError(Exception):
    """No user identifier available for the request"""
    pass
