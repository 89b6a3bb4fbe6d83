"""Pydantic models for the certificate API."""

import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class CertificateFields(BaseModel):
    """Metadata bundle submitted with a create or update request."""

    name: Optional[str] = Field(None, description="Certificate name")
    title: Optional[str] = Field(None, description="Certificate title")
    description: Optional[str] = Field(None, description="Certificate description")
    provider: Optional[str] = Field(None, description="Issuing provider")
    category: Optional[str] = Field(None, description="Certificate category")
    date: Optional[str] = Field(None, description="Issue date, YYYY-MM-DD")
    link: Optional[str] = Field(None, description="External link")

    @field_validator("date", mode="before")
    @classmethod
    def blank_date_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def identifier(self) -> Optional[str]:
        """The identifying field, whichever of name/title was sent."""
        return self.name or self.title


class ImageUpload(BaseModel):
    """An uploaded image file held in memory."""

    filename: str = Field(..., min_length=1, description="Original client filename")
    content_type: str = Field("application/octet-stream", description="MIME type")
    data: bytes = Field(..., description="Raw file bytes")


class Certificate(BaseModel):
    """A row of the certificates table."""

    id: int = Field(..., description="Server-generated identifier")
    name: Optional[str] = Field(None, description="Certificate name")
    title: Optional[str] = Field(None, description="Certificate title")
    description: Optional[str] = Field(None, description="Certificate description")
    provider: Optional[str] = Field(None, description="Issuing provider")
    category: Optional[str] = Field(None, description="Certificate category")
    date: Optional[datetime.date] = Field(None, description="Issue date")
    link: Optional[str] = Field(None, description="External link")
    image: Optional[str] = Field(None, description="Public URL of the stored image")

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "AWS Cert",
                "title": None,
                "description": "Solutions Architect Associate",
                "provider": "Amazon Web Services",
                "category": "cloud",
                "date": "2022-01-01",
                "link": "https://aws.amazon.com/certification/",
                "image": "https://project.supabase.co/storage/v1/object/public/images/public/aws.png"
            }
        }


class MessageResponse(BaseModel):
    """Welcome message returned by the root endpoint."""

    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str

    class Config:
        """Pydantic config."""
        json_schema_extra = {"example": {"error": "Certificate not found"}}
