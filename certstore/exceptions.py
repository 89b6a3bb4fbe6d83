"""Error kinds raised by the certificate store."""


class CertificateServiceError(Exception):
    """Base class for every failure surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CertificateServiceError):
    """A required field or the image file is missing."""

    status_code = 400


class NotFoundError(CertificateServiceError):
    """No certificate row matches the requested identifier."""

    status_code = 404


class UploadError(CertificateServiceError):
    """The object store rejected or failed the upload."""


class PersistenceError(CertificateServiceError):
    """The relational statement failed or violated a constraint."""
