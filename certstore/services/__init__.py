"""Certificate services module."""

from .certificates import CertificateService
from .database import CertificateRepository
from .storage import StorageService

__all__ = ["CertificateService", "CertificateRepository", "StorageService"]
