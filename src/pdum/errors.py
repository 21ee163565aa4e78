"""
pdum error types.

Every failure carries a stable ``code``. Decode errors are raised by the codec
and are meant to be caught by the caller, who decides whether the envelope is
corrupt, tampered or simply needs refetching.
"""

from typing import Any, Optional


class PdumError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class DecodeError(PdumError):
    """Base class for every failure of the layered payload codec."""


class InvalidBase64(DecodeError):
    def __init__(self, field: str):
        super().__init__("invalid_base64", f"{field} is not valid base64", {"field": field})
        self.field = field


class InvalidJson(DecodeError):
    def __init__(self, field: str):
        super().__init__("invalid_json", f"{field} does not hold a JSON object", {"field": field})
        self.field = field


class MissingField(DecodeError):
    def __init__(self, name: str):
        super().__init__("missing_field", f"missing required field '{name}'", {"field": name})
        self.name = name


class TypeMismatch(DecodeError):
    def __init__(self, name: str, expected: str):
        super().__init__(
            "type_mismatch", f"field '{name}' should be {expected}", {"field": name, "expected": expected},
        )
        self.name = name
        self.expected = expected


class ResourceDecodeError(DecodeError):
    """A single resource entry failed; the whole body decode fails with it."""

    def __init__(self, index: int, cause: DecodeError):
        super().__init__(
            "resource_decode_error",
            f"resource {index}: {cause}",
            {"index": index, "cause": cause.code},
        )
        self.index = index
        self.cause = cause


class CapsuleTypeMismatch(DecodeError):
    def __init__(self, expected: int, actual: int):
        super().__init__(
            "capsule_type_mismatch",
            f"capsule type {actual} cannot be read as type {expected}",
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class EnvelopeError(PdumError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("envelope_error", message, details)


class SigningError(PdumError):
    def __init__(self, message: str):
        super().__init__("signing_error", message)


class HttpError(PdumError):
    def __init__(self, status_code: int, message: str):
        super().__init__("http_error", message, {"status_code": status_code})
        self.status_code = status_code


class ConnectionError(PdumError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)
