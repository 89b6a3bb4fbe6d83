"""Certificate models module."""

from .certificate import (
    Certificate,
    CertificateFields,
    ErrorResponse,
    ImageUpload,
    MessageResponse,
)

__all__ = [
    "Certificate",
    "CertificateFields",
    "ImageUpload",
    "MessageResponse",
    "ErrorResponse",
]
