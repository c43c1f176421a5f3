"""Exception hierarchy for property binding and value conversion."""


class PropertyBindingError(Exception):
    """Base exception for property binding errors.

    Conversions fail on caller-supplied text, and property paths name the
    internals of the caller's objects. ``str(exc)`` is the short
    ``user_message``, which never echoes the input or the path, so it is
    safe to show to whoever typed the value. ``internal()`` carries the
    rejected text, the pattern or the path for logs.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class ConversionError(PropertyBindingError):
    """Raised when a value cannot be parsed or formatted by its converter."""


class InvalidPatternError(ConversionError):
    """Raised when a format pattern is malformed or uses unsupported letters."""


class NoSuchPropertyError(PropertyBindingError):
    """Raised by accessors when a property cannot be found on a target."""


class InvalidPropertyPathError(NoSuchPropertyError):
    """Raised when a nested property path cannot be parsed."""


class PropertyAccessError(PropertyBindingError):
    """Raised when reading or writing an existing property fails."""


class NullNestedPropertyError(PropertyAccessError):
    """Raised when an intermediate value of a nested path is None."""


# Sanitized user-facing error message constants
ERR_MSG_CONVERSION_FAILED = "value conversion failed"
ERR_MSG_INVALID_PATTERN = "invalid pattern"
ERR_MSG_NO_SUCH_PROPERTY = "no such property"
ERR_MSG_INVALID_PATH = "invalid property path"
ERR_MSG_PROPERTY_ACCESS = "property access failed"
ERR_MSG_NULL_NESTED = "null nested property value"
ERR_MSG_OUT_OF_RANGE = "number out of range"
ERR_MSG_NOT_ASSIGNABLE = "value not assignable to property type"
