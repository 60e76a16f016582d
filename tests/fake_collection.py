"""In-memory stand-in for the parts of AsyncIOMotorCollection the service uses."""
import copy
from types import SimpleNamespace

import bson
from bson import ObjectId
from bson.codec_options import CodecOptions
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

# Matches the tz_aware client opened in main.lifespan
CODEC_OPTIONS = CodecOptions(tz_aware=True)


def _through_bson(document):
    """What the server keeps: millisecond dates, UTC, BSON types only."""
    return bson.decode(bson.encode(document), codec_options=CODEC_OPTIONS)


class _Cursor:
    def __init__(self, documents):
        self._documents = documents

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for document in self._documents:
            yield document


class FakeCollection:
    """
    Stores documents in a list. `unique_fields` emulates unique indexes so the
    duplicate-key path can be exercised.
    """

    def __init__(self, name="entries", unique_fields=()):
        self.name = name
        self.unique_fields = tuple(unique_fields)
        self.documents = []

    def _matches(self, document, query):
        return all(document.get(key) == value for key, value in query.items())

    def _check_unique(self, candidate, ignore_id=None):
        for field in self.unique_fields:
            if field not in candidate:
                continue
            for existing in self.documents:
                if existing["_id"] != ignore_id and existing.get(field) == candidate[field]:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.name} index: {field}_1",
                        11000,
                        {"keyValue": {field: candidate[field]}},
                    )

    async def insert_one(self, document):
        # pymongo adds the generated _id to the caller's document
        document.setdefault("_id", ObjectId())
        self._check_unique(document)
        self.documents.append(_through_bson(document))
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    def find(self, query=None):
        query = query or {}
        return _Cursor([copy.deepcopy(d) for d in self.documents if self._matches(d, query)])

    async def find_one(self, query):
        for document in self.documents:
            if self._matches(document, query):
                return copy.deepcopy(document)
        return None

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        for document in self.documents:
            if self._matches(document, query):
                before = copy.deepcopy(document)
                changes = update.get("$set", {})
                self._check_unique(changes, ignore_id=document["_id"])
                document.update(_through_bson(changes))
                return copy.deepcopy(document) if return_document == ReturnDocument.AFTER else before
        return None

    async def find_one_and_delete(self, query):
        for index, document in enumerate(self.documents):
            if self._matches(document, query):
                return self.documents.pop(index)
        return None


class BrokenCollection(FakeCollection):
    """Every read fails with an error the API does not know about."""

    def find(self, query=None):
        raise RuntimeError("cursor exploded")

    async def find_one(self, query):
        raise RuntimeError("cursor exploded")
