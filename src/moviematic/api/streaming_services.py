"""Streaming service API endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.config import get_settings
from moviematic.database import get_db
from moviematic.exceptions import NotFoundError
from moviematic.models.movie import MovieStreamingPlatform
from moviematic.models.streaming_service import StreamingService
from moviematic.schemas.review import MessageResponse
from moviematic.schemas.streaming_service import (
    StreamingServiceCreate,
    StreamingServiceResponse,
    StreamingServiceUpdate,
)
from moviematic.services.integrity import ensure_unique_service_name, save_streaming_service
from moviematic.services.storage import ImageStorage, get_image_storage
from moviematic.utils.security import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/streaming-services", tags=["streaming-services"])


async def get_service(db: AsyncSession, service_id: int) -> StreamingService:
    result = await db.execute(select(StreamingService).where(StreamingService.id == service_id))
    service = result.scalar_one_or_none()
    if service is None:
        raise NotFoundError("Streaming service not found", code="SERVICE_NOT_FOUND")
    return service


@router.get("", response_model=list[StreamingServiceResponse])
async def list_active_services(db: AsyncSession = Depends(get_db)) -> list[StreamingServiceResponse]:
    """List active streaming services by name."""
    query = (
        select(StreamingService)
        .where(StreamingService.is_active.is_(True))
        .order_by(StreamingService.name)
    )
    result = await db.execute(query)
    return [StreamingServiceResponse.model_validate(s) for s in result.scalars().all()]


@router.get("/admin", response_model=list[StreamingServiceResponse])
async def list_all_services(
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> list[StreamingServiceResponse]:
    """List every streaming service, inactive ones included. Admin only."""
    result = await db.execute(select(StreamingService).order_by(StreamingService.name))
    return [StreamingServiceResponse.model_validate(s) for s in result.scalars().all()]


@router.get("/{service_id}", response_model=StreamingServiceResponse)
async def get_streaming_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
) -> StreamingServiceResponse:
    service = await get_service(db, service_id)
    return StreamingServiceResponse.model_validate(service)


@router.post("", response_model=StreamingServiceResponse, status_code=201)
async def create_streaming_service(
    admin: AdminUser,
    service_data: StreamingServiceCreate,
    db: AsyncSession = Depends(get_db),
) -> StreamingServiceResponse:
    """Register a streaming service. Admin only.

    Raises:
        DuplicateServiceNameError (409): If the name is taken, ignoring case
    """
    await ensure_unique_service_name(db, service_data.name)

    now = datetime.now(UTC)
    service = StreamingService(**service_data.model_dump(), created_at=now, updated_at=now)
    db.add(service)
    await save_streaming_service(db, service)

    logger.info("Admin %s created streaming service %s (%s)", admin.id, service.id, service.name)
    return StreamingServiceResponse.model_validate(service)


@router.put("/{service_id}", response_model=StreamingServiceResponse)
async def update_streaming_service(
    service_id: int,
    admin: AdminUser,
    service_data: StreamingServiceUpdate,
    db: AsyncSession = Depends(get_db),
) -> StreamingServiceResponse:
    """Update a streaming service. Admin only.

    Raises:
        NotFoundError (404): If the service does not exist
        DuplicateServiceNameError (409): If the new name belongs to another service
    """
    service = await get_service(db, service_id)

    changes = service_data.model_dump(exclude_unset=True)
    if "name" in changes:
        await ensure_unique_service_name(db, changes["name"], exclude_id=service.id)

    for field, value in changes.items():
        setattr(service, field, value)
    service.updated_at = datetime.now(UTC)
    await save_streaming_service(db, service)

    return StreamingServiceResponse.model_validate(service)


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_streaming_service(
    service_id: int,
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
) -> MessageResponse:
    """Delete a streaming service and unlink it from every movie. Admin only."""
    service = await get_service(db, service_id)
    icon = service.icon

    unlinked = await db.execute(
        delete(MovieStreamingPlatform).where(MovieStreamingPlatform.service_id == service.id)
    )
    await db.delete(service)
    await db.flush()

    await storage.delete(icon)

    logger.info(
        "Admin %s deleted streaming service %s (%d movie links removed)",
        admin.id,
        service_id,
        unlinked.rowcount,
    )
    return MessageResponse(message="Streaming service deleted successfully")


@router.put("/{service_id}/icon", response_model=StreamingServiceResponse)
async def upload_service_icon(
    service_id: int,
    admin: AdminUser,
    file: UploadFile = File(..., description="Icon image (max 2MB)"),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
) -> StreamingServiceResponse:
    """Upload or replace a streaming service's icon. Admin only.

    Raises:
        InvalidUploadError (400): If the file is not an image
        FileTooLargeError (400): If the file exceeds the size limit
    """
    service = await get_service(db, service_id)

    path = await storage.save_image(
        file,
        subdir="icons",
        prefix="icon",
        max_bytes=get_settings().max_icon_size,
    )

    old_icon = service.icon
    service.icon = path
    service.updated_at = datetime.now(UTC)
    await db.flush()

    await storage.delete(old_icon)
    return StreamingServiceResponse.model_validate(service)
