"""
Custom exceptions for the vq vector quantization library.
"""


class VQError(Exception):
    """Base exception class for all vq-related errors."""
    pass


class DimensionMismatchError(VQError):
    """Exception raised when two operands or an input disagree in length."""

    def __init__(self, expected: int, found: int):
        self.expected = int(expected)
        self.found = int(found)
        super().__init__(f"Dimension mismatch: expected {self.expected}, got {self.found}")


class EmptyInputError(VQError):
    """Exception raised when an operation receives no vectors."""

    def __init__(self, message: str = "Empty input: at least one vector is required."):
        super().__init__(message)


class InvalidParameterError(VQError):
    """Exception raised for malformed hyperparameters."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid parameter: {reason}")


class InvalidMetricParameterError(VQError):
    """Exception raised when a distance metric is given an invalid parameter."""

    def __init__(self, metric: str, details: str):
        self.metric = metric
        self.details = details
        super().__init__(f"Invalid metric parameter for {metric}: {details}")
