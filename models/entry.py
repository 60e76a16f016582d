"""Pydantic models for ledger Entry data"""
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_serializer,
    model_validator,
)

# Whitespace is stripped before the length checks run
PartyName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=300)]
Amount = Annotated[float, Field(ge=0, allow_inf_nan=False)]


def _to_bson_datetime(value: datetime) -> datetime:
    """UTC with millisecond precision, the resolution of a BSON date. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


StoredDate = Annotated[datetime, AfterValidator(_to_bson_datetime)]


def _utcnow() -> datetime:
    return _to_bson_datetime(datetime.now(timezone.utc))


class EntryCreate(BaseModel):
    """
    Body of a create request. `from` is a Python keyword, so the field is
    stored as `from_` and exposed under its alias.
    """
    model_config = ConfigDict(populate_by_name=True)

    from_: PartyName = Field(alias="from")
    to: PartyName
    amount: Amount
    description: Optional[Description] = None
    date: StoredDate = Field(default_factory=_utcnow)

    def to_document(self) -> Dict[str, Any]:
        """Mongo document for insertion; unset optional fields are left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


class EntryUpdate(BaseModel):
    """Partial update: only the fields present in the body are applied."""
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[PartyName] = Field(default=None, alias="from")
    to: Optional[PartyName] = None
    amount: Optional[Amount] = None
    description: Optional[Description] = None
    date: Optional[StoredDate] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "EntryUpdate":
        fields = type(self).model_fields
        missing = [
            fields[name].alias or name
            for name in ("from_", "to", "amount", "date")
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"{', '.join(missing)} cannot be null")
        return self

    def to_update_document(self) -> Dict[str, Any]:
        """Fields for a `$set`, keyed by their stored names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class Entry(BaseModel):
    """
    A persisted ledger entry as returned to clients.
    """
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    from_: str = Field(alias="from")
    to: str
    amount: float
    description: Optional[str] = None
    date: datetime

    @field_serializer("amount")
    def serialize_amount(self, amount: float):
        # Stored as a double; whole amounts are echoed without a fraction
        return int(amount) if amount.is_integer() else amount

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Entry":
        data = dict(document)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class EntryResponse(BaseModel):
    entry: Entry


class EntryListResponse(BaseModel):
    entries: List[Entry]
