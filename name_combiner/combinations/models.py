"""Pydantic models for generated name combinations"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

Goodness = Annotated[float, Field(ge=0.0, le=5.0, description="Quality score between 0.0 and 5.0 with one decimal")]


class GeneratedName(BaseModel):
    """One canonical, scored name produced by the model"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Combined name")
    goodness: Goodness


class StoredName(GeneratedName):
    """A generated name as persisted, with its row id"""

    id: int


class CombinationSet(BaseModel):
    """One user request (two names) together with its scored results"""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name1: str
    name2: str
    created_at: datetime = Field(..., serialization_alias="createdAt")
    user_id: str = Field(..., exclude=True)
    results: list[StoredName] = Field(default_factory=list)
