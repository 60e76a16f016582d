"""API Routes for ledger entries"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from motor.motor_asyncio import AsyncIOMotorCollection

from models.entry import EntryCreate, EntryListResponse, EntryResponse, EntryUpdate
from services import entries_service
from utils.error_handlers import DATABASE_UNAVAILABLE_MESSAGE, error_response
from utils.results import ERROR_STATUS, ErrorKind, Failure

router = APIRouter(prefix="/entries")
logger = logging.getLogger(__name__)


# --- Dependency Function ---
def get_entries_collection(request: Request) -> AsyncIOMotorCollection:
    """Dependency to get the entries collection opened by the app lifespan."""
    collection = getattr(request.app.state, "entries_collection", None)
    if collection is None:
        logger.error("Entries collection not found in application state. Check MongoDB connection.")
        raise HTTPException(
            status_code=ERROR_STATUS[ErrorKind.DATABASE_UNAVAILABLE],
            detail=DATABASE_UNAVAILABLE_MESSAGE,
        )
    return collection


EntriesCollectionDep = Annotated[AsyncIOMotorCollection, Depends(get_entries_collection)]


# --- API Routes ---

@router.get("", response_model=EntryListResponse, response_model_exclude_none=True,
            summary="Get All Entries")
async def get_all_entries(collection: EntriesCollectionDep):
    logger.info("GET /entries endpoint called.")
    entries = await entries_service.get_all_entries(collection)
    return EntryListResponse(entries=entries)


@router.post("", response_model=EntryResponse, response_model_exclude_none=True,
             status_code=201, summary="Create Entry")
async def create_entry(entry: EntryCreate, collection: EntriesCollectionDep):
    logger.info("POST /entries endpoint called.")
    created = await entries_service.create_entry(collection, entry)
    return EntryResponse(entry=created)


@router.get("/{entry_id}", response_model=EntryResponse, response_model_exclude_none=True,
            summary="Get Entry")
async def get_entry(entry_id: str, collection: EntriesCollectionDep):
    logger.info(f"GET /entries/{entry_id} endpoint called.")
    result = await entries_service.get_entry(collection, entry_id)
    if isinstance(result, Failure):
        return error_response(result)
    return EntryResponse(entry=result.value)


@router.patch("/{entry_id}", response_model=EntryResponse, response_model_exclude_none=True,
              summary="Update Entry")
async def update_entry(entry_id: str, changes: EntryUpdate, collection: EntriesCollectionDep):
    logger.info(f"PATCH /entries/{entry_id} endpoint called.")
    result = await entries_service.update_entry(collection, entry_id, changes)
    if isinstance(result, Failure):
        return error_response(result)
    return EntryResponse(entry=result.value)


@router.delete("/{entry_id}", response_model=EntryResponse, response_model_exclude_none=True,
               summary="Delete Entry")
async def delete_entry(entry_id: str, collection: EntriesCollectionDep):
    logger.info(f"DELETE /entries/{entry_id} endpoint called.")
    result = await entries_service.delete_entry(collection, entry_id)
    if isinstance(result, Failure):
        return error_response(result)
    return EntryResponse(entry=result.value)
