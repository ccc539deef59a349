from typing import Optional

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from core.constants import MAX_COTTON_PERCENTAGE, MAX_INTEGER, MIN_COTTON_PERCENTAGE, MIN_INTEGER
from core.exceptions import FileReadError
from core.logging import get_logger
from db.database import get_async_session
from schemas.socks import AmountResponse, SockRequest, SockResponse, SocksList, SockUpdate
from services import batch as batch_service
from services import socks as sock_service
from services.filters import SockOperation, SortField

logger = get_logger(__name__)

router = APIRouter()


@router.post("/income", response_model=SockResponse)
async def add_socks(payload: SockRequest, db: AsyncSession = Depends(get_async_session)):
    """Register an arrival of socks"""
    return await sock_service.register_arrival(db, payload)


@router.post("/outcome", response_model=SockResponse)
async def remove_socks(payload: SockRequest, db: AsyncSession = Depends(get_async_session)):
    """Register a departure of socks; removing the whole stock deletes the record"""
    return await sock_service.register_departure(db, payload)


@router.get("", response_model=AmountResponse)
async def get_socks_amount(
    color: str = Query(..., min_length=1, description="Color of the socks"),
    operation: str = Query(..., description="moreThan, lessThan or equal"),
    cotton: int = Query(..., ge=MIN_COTTON_PERCENTAGE, le=MAX_COTTON_PERCENTAGE, description="Cotton percentage"),
    db: AsyncSession = Depends(get_async_session),
):
    """Total amount of socks of a color whose cotton percentage matches the operation"""
    op = SockOperation.parse(operation)
    return await sock_service.get_socks_amount(db, color, op, cotton)


@router.put("/{sock_id}", response_model=SockResponse)
async def update_sock(
    payload: SockUpdate,
    sock_id: int = Path(..., ge=1, le=MAX_INTEGER),
    db: AsyncSession = Depends(get_async_session),
):
    """Update the given fields of a sock record"""
    return await sock_service.update_sock(db, sock_id, payload)


@router.post("/batch", response_model=SocksList)
async def upload_socks_batch(
    file: UploadFile = File(..., description="CSV file with color,cottonPercentage,amount columns"),
    db: AsyncSession = Depends(get_async_session),
):
    """Create sock records from an uploaded CSV file"""
    try:
        content = await file.read()
    except OSError as e:
        logger.error("Failed to read uploaded file {}: {}", file.filename, e)
        raise FileReadError(f"Could not read uploaded file {file.filename!r}") from e
    logger.debug("Received {} bytes in {}", len(content), file.filename)
    return await batch_service.process_socks_batch(db, file.filename, content)


@router.get("/filter-by-cotton", response_model=SocksList)
async def get_socks_by_cotton(
    from_: int = Query(..., alias="from", ge=MIN_INTEGER, le=MAX_INTEGER, description="Minimum cotton percentage (inclusive)"),
    to: int = Query(..., ge=MIN_INTEGER, le=MAX_INTEGER, description="Maximum cotton percentage (inclusive)"),
    sorted_by: Optional[str] = Query(None, alias="sortedBy", description="color or cotton"),
    db: AsyncSession = Depends(get_async_session),
):
    """List socks within a cotton percentage range, optionally sorted"""
    sort_field = SortField.parse(sorted_by)
    return await sock_service.list_socks_by_cotton(db, from_, to, sort_field)
