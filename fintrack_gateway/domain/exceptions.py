"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PersistenceError(DomainException):
    """A write to the transaction store failed"""

    pass


class StorageError(DomainException):
    """Object storage upload failed or returned no public URL"""

    pass


class NoActiveAccountError(DomainException):
    """User has no active account to import into"""

    pass


class InvalidPeriodError(DomainException):
    """Budget period kind is not recognised"""

    pass
