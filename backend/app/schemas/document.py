"""
Document and document share schemas.
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class DocumentCreate(BaseModel):
    organization_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    file_type: Optional[str] = None
    file_size: int = Field(0, ge=0)
    file_url: str = Field(..., min_length=1, max_length=500)
    is_public: bool = False


class DocumentResponse(BaseModel):
    id: int
    organization_id: int
    name: str
    description: Optional[str] = None
    file_type: str
    file_size: int
    file_url: str
    is_public: bool
    uploaded_by_id: Optional[int] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class DocumentListResponse(BaseModel):
    page: int
    perPage: int
    totalItems: int
    totalPages: int
    items: list[DocumentResponse]


class SharePermissions(BaseModel):
    view: bool = True
    download: bool = True
    print: bool = True


class ShareCreate(BaseModel):
    share_name: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = None
    require_email: bool = False
    require_tos_acceptance: bool = False
    permissions: SharePermissions = Field(default_factory=SharePermissions)
    max_downloads: Optional[int] = Field(None, ge=1)
    expires_at: Optional[datetime] = None
    watermark_text: Optional[str] = Field(None, max_length=255)


class ShareResponse(BaseModel):
    id: int
    document_id: int
    organization_id: int
    share_token: str
    share_url: str
    share_name: Optional[str] = None
    password_protected: bool
    require_email: bool
    require_tos_acceptance: bool
    permissions: SharePermissions
    max_downloads: Optional[int] = None
    current_downloads: int
    expires_at: Optional[datetime] = None
    watermark_text: Optional[str] = None
    is_active: bool
    created: datetime


class DocumentStatistics(BaseModel):
    document_id: int
    period: str
    total_views: int
    total_downloads: int
    unique_visitors: int
