from typing import Final


class ReadingError(Exception):
    """Root class for all distinguished errors raised by this library.

    Args:
        msg: Error message
        retryable: Whether the operation that caused this error can be retried
    """

    def __init__(self, *, msg: str, retryable: bool = True) -> None:
        super().__init__(msg)
        self._retryable = retryable

    @property
    def retryable(self) -> bool:
        """Whether this error indicates a retryable operation."""
        return self._retryable


class PreconditionError(ReadingError):
    """Error raised when a caller violates the contract of an operation.

    Args:
        argument: Name of the offending argument
        expected: Description of what the argument must be
        received: The value (or its type) actually received
    """

    def __init__(self, *, argument: str, expected: str, received: object) -> None:
        received_desc: Final[str] = (
            "None" if received is None else f"value of type {type(received).__name__}"
        )
        super().__init__(
            msg=f"Precondition violated for '{argument}': expected {expected}, got {received_desc}",
            retryable=False,
        )
        self.argument = argument
        self.expected = expected


# Data Processing Errors
class DataProcessingError(ReadingError):
    """Base class for data processing errors."""


class TranscriptFormatError(DataProcessingError):
    """Error for transcript payloads whose overall shape is not recognised.

    Args:
        error_details: Description of what was wrong with the payload
        source: Optional file path the payload was read from
    """

    def __init__(self, *, error_details: str, source: str | None = None) -> None:
        msg = f"Unrecognised transcript payload: {error_details}"
        if source:
            msg += f" (Source: {source})"
        super().__init__(msg=msg, retryable=False)
        self.source = source


class ReferenceFormatError(DataProcessingError):
    """Error for reference text inputs that cannot be interpreted.

    Args:
        error_details: Description of what was wrong with the reference
        source: Optional file path the reference was read from
    """

    def __init__(self, *, error_details: str, source: str | None = None) -> None:
        msg = f"Unrecognised reference input: {error_details}"
        if source:
            msg += f" (Source: {source})"
        super().__init__(msg=msg, retryable=False)
        self.source = source
