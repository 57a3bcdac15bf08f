"""
Ballot schemas
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from halloffame.schemas.nominations import normalize_year


class SelectionInput(BaseModel):
    person_name: str = Field(..., max_length=255)
    person_year: Optional[str] = None

    @field_validator("person_name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("person_name cannot be empty")
        return value

    @field_validator("person_year", mode="before")
    @classmethod
    def coerce_year(cls, value: Any) -> str:
        # Unknown year is stored as ""
        return normalize_year(value) or ""

    @property
    def key(self):
        return (self.person_name, self.person_year or "")


class BallotSubmission(BaseModel):
    selections: List[SelectionInput]


class SelectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    person_name: str
    person_year: str
    created_at: datetime
    updated_at: datetime


class BallotSaved(BaseModel):
    message: str = "Ballot saved successfully"
    count: int
