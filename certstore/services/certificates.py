"""Certificate service: validation and the image/row dual write."""

import logging
from typing import List, Optional

from certstore.exceptions import NotFoundError, PersistenceError, ValidationError
from certstore.models import Certificate, CertificateFields, ImageUpload
from certstore.services.database import CertificateRepository
from certstore.services.storage import StorageService

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Certificate not found"


class CertificateService:
    """Orchestrates object storage and the certificates table.

    Writes are sequential: the image upload finishes before the SQL
    statement is issued. There is no rollback across the two stores, so a
    failed statement after a successful upload leaves the uploaded object
    unreferenced. Deleting a row never deletes its image.
    """

    def __init__(self, storage: StorageService, repository: CertificateRepository):
        """Initialize the service.

        Args:
            storage: Object store used for images
            repository: Relational store holding certificate rows
        """
        self.storage = storage
        self.repository = repository

    async def create_certificate(
        self, fields: CertificateFields, image: Optional[ImageUpload]
    ) -> Certificate:
        """Upload the image, then insert the row.

        Args:
            fields: Metadata; name or title is required
            image: Uploaded image; required

        Returns:
            The inserted row

        Raises:
            ValidationError: If the identifying field or the image is missing
            UploadError: If the upload fails (nothing is written)
            PersistenceError: If the insert fails (the image stays uploaded)
        """
        if not fields.identifier or image is None:
            raise ValidationError("Name and image are required")

        image_url = await self._upload(image)
        try:
            certificate = await self.repository.insert(fields, image_url)
        except PersistenceError:
            self._log_orphan(image)
            raise

        logger.info(f"Created certificate {certificate.id} ({fields.identifier})")
        return certificate

    async def list_certificates(self) -> List[Certificate]:
        return await self.repository.list_all()

    async def get_certificate(self, certificate_id: int) -> Certificate:
        certificate = await self.repository.get(certificate_id)
        if certificate is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return certificate

    async def update_certificate(
        self,
        certificate_id: int,
        fields: CertificateFields,
        image: Optional[ImageUpload] = None,
    ) -> Certificate:
        """Overwrite a row's metadata and, if an image is given, its image.

        Omitted metadata fields are written as NULL. The upload, when there
        is one, happens before the row is looked up.

        Raises:
            NotFoundError: If no row has this id
            UploadError: If the upload fails
            PersistenceError: If the update statement fails
        """
        image_url = await self._upload(image) if image is not None else None
        try:
            certificate = await self.repository.update(certificate_id, fields, image_url)
        except PersistenceError:
            if image is not None:
                self._log_orphan(image)
            raise

        if certificate is None:
            logger.info(f"Update of missing certificate {certificate_id}")
            raise NotFoundError(NOT_FOUND_MESSAGE)

        logger.info(f"Updated certificate {certificate_id}")
        return certificate

    async def delete_certificate(self, certificate_id: int) -> Certificate:
        certificate = await self.repository.delete(certificate_id)
        if certificate is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        logger.info(f"Deleted certificate {certificate_id}")
        return certificate

    async def list_by_provider(self, provider: str) -> List[Certificate]:
        return await self.repository.list_by_provider(provider)

    async def list_by_date(self, newest_first: bool = False) -> List[Certificate]:
        return await self.repository.list_by_date(newest_first)

    async def _upload(self, image: ImageUpload) -> str:
        await self.storage.upload_image(image)
        return self.storage.public_url(image.filename)

    def _log_orphan(self, image: ImageUpload) -> None:
        logger.error(
            f"Row write failed after upload; object "
            f"{self.storage.object_key(image.filename)} is now unreferenced"
        )
