"""User Schemas — profile responses."""

from datetime import datetime

from pydantic import BaseModel


class UserProfile(BaseModel):
    user: str
    date_created: datetime
    setup_status: str


class UserDeleted(BaseModel):
    user: str
    deleted_entries: int
