"""API endpoints for certificate records."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from certstore.config import settings
from certstore.models import Certificate, CertificateFields, ErrorResponse, ImageUpload
from certstore.services.certificates import CertificateService

# Create router
router = APIRouter(
    prefix=settings.api_prefix,
    tags=["certificates"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def get_certificate_service(request: Request) -> CertificateService:
    """Certificate service built during application startup."""
    return request.app.state.certificate_service


def certificate_fields(
    name: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    provider: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    link: Optional[str] = Form(None),
) -> CertificateFields:
    """Collect the multipart metadata fields into one bundle."""
    return CertificateFields(
        name=name,
        title=title,
        description=description,
        provider=provider,
        category=category,
        date=date,
        link=link,
    )


async def read_image(image: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Read the ``image`` part into memory; None when no file was sent."""
    if image is None or not image.filename:
        return None

    return ImageUpload(
        filename=image.filename,
        content_type=image.content_type or "application/octet-stream",
        data=await image.read(),
    )


@router.post("/certificate", response_model=Certificate)
async def create_certificate(
    fields: CertificateFields = Depends(certificate_fields),
    image: Optional[UploadFile] = File(None),
    service: CertificateService = Depends(get_certificate_service),
) -> Certificate:
    """Upload an image and store a new certificate.

    Args:
        fields: Multipart metadata fields
        image: Image file part

    Returns:
        The created certificate
    """
    return await service.create_certificate(fields, await read_image(image))


@router.get("/certificates", response_model=List[Certificate])
async def list_certificates(
    service: CertificateService = Depends(get_certificate_service),
) -> List[Certificate]:
    """List every certificate."""
    return await service.list_certificates()


@router.get("/certificates/provider/{provider}", response_model=List[Certificate])
async def list_certificates_by_provider(
    provider: str,
    service: CertificateService = Depends(get_certificate_service),
) -> List[Certificate]:
    """List certificates issued by exactly this provider."""
    return await service.list_by_provider(provider)


@router.get("/certificates/oldest", response_model=List[Certificate])
async def list_oldest_certificates(
    service: CertificateService = Depends(get_certificate_service),
) -> List[Certificate]:
    """List certificates by date, oldest first."""
    return await service.list_by_date(newest_first=False)


@router.get("/certificates/newest", response_model=List[Certificate])
async def list_newest_certificates(
    service: CertificateService = Depends(get_certificate_service),
) -> List[Certificate]:
    """List certificates by date, newest first."""
    return await service.list_by_date(newest_first=True)


@router.get("/certificate/{certificate_id}", response_model=Certificate)
async def get_certificate(
    certificate_id: int,
    service: CertificateService = Depends(get_certificate_service),
) -> Certificate:
    """Get a single certificate."""
    return await service.get_certificate(certificate_id)


@router.put("/certificate/{certificate_id}", response_model=Certificate)
async def update_certificate(
    certificate_id: int,
    fields: CertificateFields = Depends(certificate_fields),
    image: Optional[UploadFile] = File(None),
    service: CertificateService = Depends(get_certificate_service),
) -> Certificate:
    """Replace a certificate's metadata, and its image if one is sent.

    Args:
        certificate_id: Certificate ID
        fields: Multipart metadata fields; omitted fields are cleared
        image: Optional replacement image

    Returns:
        The updated certificate
    """
    return await service.update_certificate(
        certificate_id, fields, await read_image(image)
    )


@router.delete("/certificate/{certificate_id}", response_model=Certificate)
async def delete_certificate(
    certificate_id: int,
    service: CertificateService = Depends(get_certificate_service),
) -> Certificate:
    """Delete a certificate row and return it."""
    return await service.delete_certificate(certificate_id)
