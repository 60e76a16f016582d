"""Service layer for ledger entry storage."""
import logging
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection  # Type hint for collection
from pymongo import ReturnDocument

from models.entry import Entry, EntryCreate, EntryUpdate
from utils.results import Ok, Result, not_found

logger = logging.getLogger(__name__)

# --- Database Interaction Functions (Depend on collection passed from route) ---
# Store errors (duplicate keys, lost connections) are not caught here; they
# reach the registered exception handlers.


def _id_filter(entry_id: str) -> Optional[dict]:
    """Filter matching `entry_id`, or None when it cannot be an ObjectId."""
    if not ObjectId.is_valid(entry_id):
        return None
    return {"_id": ObjectId(entry_id)}


async def get_all_entries(collection: AsyncIOMotorCollection) -> List[Entry]:
    """Fetches every entry in the collection, in natural order."""
    logger.info(f"Fetching all entries from collection '{collection.name}'...")
    entries = []
    async for doc in collection.find({}):
        entries.append(Entry.from_document(doc))
    logger.info(f"Fetched {len(entries)} entries.")
    return entries


async def create_entry(collection: AsyncIOMotorCollection, data: EntryCreate) -> Entry:
    """Inserts a validated entry and returns it with its store-assigned id."""
    document = data.to_document()
    result = await collection.insert_one(document)
    document["_id"] = result.inserted_id
    logger.info(f"Created entry {result.inserted_id}.")
    return Entry.from_document(document)


async def get_entry(collection: AsyncIOMotorCollection, entry_id: str) -> Result[Entry]:
    id_filter = _id_filter(entry_id)
    document = await collection.find_one(id_filter) if id_filter else None
    if document is None:
        logger.warning(f"Entry {entry_id} not found.")
        return not_found(entry_id)
    return Ok(Entry.from_document(document))


async def update_entry(
    collection: AsyncIOMotorCollection,
    entry_id: str,
    changes: EntryUpdate,
) -> Result[Entry]:
    """
    Applies the fields present in `changes` and returns the entry as it is
    after the update. An empty change set returns the entry untouched.
    """
    id_filter = _id_filter(entry_id)
    if id_filter is None:
        logger.warning(f"Entry {entry_id} not found (malformed id).")
        return not_found(entry_id)

    update_doc = changes.to_update_document()
    if not update_doc:
        # Mongo rejects an empty $set
        document = await collection.find_one(id_filter)
    else:
        logger.debug(f"Updating entry {entry_id} with fields {sorted(update_doc)}")
        document = await collection.find_one_and_update(
            id_filter,
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER,
        )

    if document is None:
        logger.warning(f"Entry {entry_id} not found.")
        return not_found(entry_id)
    logger.info(f"Updated entry {entry_id}.")
    return Ok(Entry.from_document(document))


async def delete_entry(collection: AsyncIOMotorCollection, entry_id: str) -> Result[Entry]:
    """Deletes an entry and returns the document as it was before removal."""
    id_filter = _id_filter(entry_id)
    document = await collection.find_one_and_delete(id_filter) if id_filter else None
    if document is None:
        logger.warning(f"Entry {entry_id} not found.")
        return not_found(entry_id)
    logger.info(f"Deleted entry {entry_id}.")
    return Ok(Entry.from_document(document))
