"""
Nomination schemas

Input accepts either name/year or person_name/person_year. Years may be sent
as numbers or strings and are stored as text; a blank year is stored as
NULL. Other omitted optional fields are None ("not provided"); an empty
string is kept as given.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def normalize_year(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("year must be a number or string")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not value.is_integer():
            raise ValueError("year must be a whole number")
        return str(int(value))
    if isinstance(value, str):
        return value.strip()
    raise ValueError("year must be a number or string")


class NominationFields(BaseModel):
    career_position: Optional[str] = None
    professional_achievements: Optional[str] = None
    professional_awards: Optional[str] = None
    educational_achievements: Optional[str] = None
    merit_awards: Optional[str] = None
    service_church_community: Optional[str] = None
    service_mbaphs: Optional[str] = None
    nomination_summary: Optional[str] = None
    nominator_name: Optional[str] = Field(None, max_length=255)
    nominator_email: Optional[str] = Field(None, max_length=255)
    nominator_phone: Optional[str] = Field(None, max_length=50)


class NominationCreate(NominationFields):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., validation_alias=AliasChoices("name", "person_name"), max_length=255)
    year: Optional[str] = Field(None, validation_alias=AliasChoices("year", "person_year"))

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name cannot be empty")
        return value

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value: Any) -> Optional[str]:
        # A blank year is the same unknown year as an omitted one
        return normalize_year(value) or None


class NominationUpdate(NominationFields):
    """Partial update: only fields present in the payload are applied."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, validation_alias=AliasChoices("name", "person_name"), max_length=255)
    year: Optional[str] = Field(None, validation_alias=AliasChoices("year", "person_year"))

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("name cannot be cleared")
        value = value.strip()
        if not value:
            raise ValueError("name cannot be empty")
        return value

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value: Any) -> Optional[str]:
        return normalize_year(value) or None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class NominationResponse(NominationFields):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    person_name: str = Field(..., validation_alias=AliasChoices("name", "person_name"))
    person_year: Optional[str] = Field(None, validation_alias=AliasChoices("year", "person_year"))
    created_at: datetime
    created_by: Optional[int] = None


class ImportRequest(BaseModel):
    # Rows stay loosely typed here so one bad row cannot reject the batch
    nominations: List[Any] = Field(..., min_length=1)


class ImportRowError(BaseModel):
    row: int
    reason: str


class ImportResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Import completed"
    success_count: int = Field(0, serialization_alias="successCount")
    error_count: int = Field(0, serialization_alias="errorCount")
    errors: List[ImportRowError] = Field(default_factory=list)
