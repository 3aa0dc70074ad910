"""Cheer queue API routes (admin page)."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from cheerbridge.core.dependencies import get_cheer_ingestor, get_cheer_processor, get_cheer_queue
from cheerbridge.core.exceptions import (
    ArtifactError,
    EntryNotFoundError,
    InvalidIndexError,
    SynthesisError,
)
from cheerbridge.services import CheerIngestor, CheerProcessor, CheerQueue

logger = logging.getLogger(__name__)

router = APIRouter(tags=["queue"])

TEST_CHEER_USER = "testuser"
TEST_CHEER_MESSAGE = "This is a test cheer!"
TEST_CHEER_BITS = 100


# ============================================
# Response / Request Models
# ============================================


class CheerResponse(BaseModel):
    id: str
    user: str
    message: str
    bits: int


class ProcessResponse(BaseModel):
    success: bool
    cheer: CheerResponse
    url: str | None = None
    audioUrl: str


class CheerActionResponse(BaseModel):
    success: bool
    cheer: CheerResponse | None = None


class RemoveByIndexRequest(BaseModel):
    index: int | None = None

    @field_validator("index", mode="before")
    @classmethod
    def non_integer_is_unset(cls, v):
        """Anything that is not a whole number is answered like an out-of-range index"""
        if isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, str) and v.strip().removeprefix("-").isdigit():
            return int(v)
        return None


class TestCheerRequest(BaseModel):
    user: str | None = None
    message: str | None = None
    bits: int | None = Field(default=None, ge=0)


def _failure(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "message": message, **extra}
    )


# ============================================
# Queue Endpoints
# ============================================


@router.get("/queue", response_model=list[CheerResponse])
async def get_queue(queue: CheerQueue = Depends(get_cheer_queue)) -> list[CheerResponse]:
    """Current queue, oldest first."""
    return [CheerResponse(**entry.to_dict()) for entry in queue.snapshot()]


@router.delete("/queue", response_model=CheerActionResponse)
async def remove_by_index(
    body: RemoveByIndexRequest | None = None,
    queue: CheerQueue = Depends(get_cheer_queue),
):
    """Drop the cheer at a queue position without processing it."""
    index = body.index if body is not None else None
    if index is None:
        logger.info("Invalid index: missing or not an integer")
        return _failure(400, "Invalid index")
    try:
        entry = queue.remove_at(index)
    except InvalidIndexError:
        logger.info(f"Invalid index: {index}")
        return _failure(400, "Invalid index")

    logger.info(f"Removed cheer at index {index}")
    return CheerActionResponse(success=True, cheer=CheerResponse(**entry.to_dict()))


@router.delete("/queue/{entry_id}", response_model=CheerActionResponse)
async def remove_by_id(
    entry_id: str,
    queue: CheerQueue = Depends(get_cheer_queue),
):
    """Drop a cheer by id; unaffected by concurrent dequeues."""
    try:
        entry = queue.remove_by_id(entry_id)
    except EntryNotFoundError:
        return _failure(404, "Cheer not found")

    logger.info(f"Removed cheer {entry_id}")
    return CheerActionResponse(success=True, cheer=CheerResponse(**entry.to_dict()))


@router.post("/process", response_model=ProcessResponse)
async def process_next(processor: CheerProcessor = Depends(get_cheer_processor)):
    """Run one processing cycle on the oldest cheer."""
    try:
        result = await processor.process_next()
    except (SynthesisError, ArtifactError) as e:
        logger.error(f"Error processing cheer: {e}")
        return _failure(500, "Failed to process cheer", error=str(e))

    if result is None:
        return _failure(404, "No cheers in queue")

    return ProcessResponse(
        success=True,
        cheer=CheerResponse(**result.cheer.to_dict()),
        url=result.url,
        audioUrl=result.audio_url,
    )


@router.post("/test-cheer", response_model=CheerActionResponse)
async def add_test_cheer(
    body: TestCheerRequest,
    ingestor: CheerIngestor = Depends(get_cheer_ingestor),
) -> CheerActionResponse:
    """Queue a synthetic cheer, bypassing Twitch chat."""
    entry = ingestor.ingest(
        user=body.user or TEST_CHEER_USER,
        message=body.message or TEST_CHEER_MESSAGE,
        bits=body.bits if body.bits is not None else TEST_CHEER_BITS,
    )
    logger.info(f"Test cheer added to queue: {entry.user}")
    return CheerActionResponse(success=True, cheer=CheerResponse(**entry.to_dict()))
