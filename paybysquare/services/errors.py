"""Shared service error definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


class CompressionUnavailable(ServiceError):
    """Compression backend cannot be located or started."""


class CompressionFailed(ServiceError):
    """Compression backend ran but did not produce a result."""


class InvalidConfiguration(ServiceError):
    """Caller-supplied encoder configuration is unusable."""


class PayloadTooLarge(ServiceError):
    pass


class BadPayload(ServiceError):
    pass


def err_compression_unavailable(message: str | None = None) -> CompressionUnavailable:
    return CompressionUnavailable(
        code="ERR_COMPRESSION_UNAVAILABLE",
        message=message or "Compression backend is not available",
        status_code=503,
    )


def err_compression_failed(message: str | None = None) -> CompressionFailed:
    return CompressionFailed(code="ERR_COMPRESSION_FAILED", message=message or "Compression failed", status_code=500)


def err_invalid_configuration(message: str | None = None) -> InvalidConfiguration:
    return InvalidConfiguration(
        code="ERR_INVALID_CONFIGURATION",
        message=message or "Invalid encoder configuration",
        status_code=500,
    )


def err_payload_too_large(message: str | None = None) -> PayloadTooLarge:
    return PayloadTooLarge(code="ERR_PAYLOAD_TOO_LARGE", message=message or "Payment record is too large", status_code=413)


def err_bad_payload(message: str | None = None) -> BadPayload:
    return BadPayload(code="ERR_BAD_PAYLOAD", message=message or "Invalid request payload", status_code=400)
