"""Entry Schemas — request bodies for the journal entry routes.

Invariants:
    - mood is a plain string here; the linking rules parse it and name the bad value
    - tags / activities are references {id, name?, type?}; unknown keys are dropped

Design Decisions:
    - linked_entry typed as UUID: malformed ids are rejected before the service runs
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EntryRef(BaseModel):
    """Reference-or-snapshot of a catalog item."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, max_length=64)
    name: str | None = Field(None, max_length=100)
    type: str | None = Field(None, max_length=100)


class EntryCreate(BaseModel):
    mood: str | None = None
    emotion: str | None = Field(None, max_length=100)
    text: str | None = Field(None, max_length=20_000)
    tags: list[EntryRef] | None = None
    activities: list[EntryRef] | None = None
    linked_entry: UUID | None = None


class EntryUpdate(BaseModel):
    """Patch — only supplied fields are applied."""
    mood: str | None = None
    emotion: str | None = Field(None, max_length=100)
    text: str | None = Field(None, max_length=20_000)
    tags: list[EntryRef] | None = None
    activities: list[EntryRef] | None = None
    linked_entry: UUID | None = None
