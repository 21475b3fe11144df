# Custom exceptions

"""
Custom exceptions for audit setup.
"""

class StoreSetupError(Exception):
    """Raised when the store cannot be opened for auditing; nothing is checked."""
    pass
