"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class EntityRecognitionUnavailable(DomainException):
    """Entity-recognition model could not be loaded or invoked"""

    pass
