"""Parameter schemas for the IFRC GO tools.

All models are strict and reject unknown fields, so malformed arguments fail
before any upstream request is built. The JSON schema of each model is what
tools/list advertises.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_LIMIT = 50
MAX_LIMIT = 1000

Limit = Annotated[int, Field(ge=1, le=MAX_LIMIT, description=f"Number of records to return (max {MAX_LIMIT})")]
Offset = Annotated[int, Field(ge=0, description="Number of records to skip")]
CountryIso = Annotated[str, Field(
    min_length=2, max_length=3, pattern=r"^[A-Za-z]{2,3}$",
    description="Country ISO code (e.g., 'BD', 'KE', 'PHL')",
    json_schema_extra={"examples": ["BD", "KE"]},
), AfterValidator(str.upper)]
IsoDate = Annotated[str, Field(
    pattern=r"^\d{4}-\d{2}-\d{2}$",
    description="Date in YYYY-MM-DD format",
    json_schema_extra={"examples": ["2023-05-14"]},
)]

PersonnelType = Literal["fact", "heop", "rdrt", "ifrc", "eru", "rr"]


class ToolParams(BaseModel):
    """Base for tool parameter models."""
    
    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class NoParams(ToolParams):
    """Tools that take no arguments."""


class PageParams(ToolParams):
    limit: Limit = DEFAULT_LIMIT
    offset: Offset = 0


class LimitParams(ToolParams):
    limit: Limit = DEFAULT_LIMIT


class CountrySearchParams(LimitParams):
    """DREF search by country: ISO code plus limit, no offset."""
    
    country_iso: CountryIso


class CountryPageParams(PageParams):
    country_iso: CountryIso


class DisasterTypeParams(LimitParams):
    disaster_type: Annotated[str, Field(
        min_length=1, max_length=100,
        description="Disaster type name, matched case-insensitively as a substring (e.g., 'flood')",
    )]


class CountryIdParams(ToolParams):
    country_id: Annotated[int, Field(ge=1, description="Numeric IFRC GO country id")]


class DateRangeParams(PageParams):
    """Emergencies whose disaster start date falls within [start_date, end_date]."""
    
    start_date: IsoDate
    end_date: IsoDate
    
    @field_validator("start_date", "end_date")
    @classmethod
    def _real_date(cls, v: str) -> str:
        date.fromisoformat(v)
        return v
    
    @model_validator(mode="after")
    def _ordered(self) -> DateRangeParams:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PersonnelTypeParams(PageParams):
    personnel_type: PersonnelType = Field(description="Deployment type: fact, heop, rdrt, ifrc, eru or rr")
    
    @field_validator("personnel_type", mode="before")
    @classmethod
    def _lower_type(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


class EruTypeParams(PageParams):
    eru_type: Annotated[int, Field(ge=0)] | Annotated[str, Field(min_length=1, max_length=100)] = Field(
        description="ERU type id, or a label/alias such as 'wash', 'logistics', 'health', 'basecamp'",
    )
