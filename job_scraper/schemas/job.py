from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


class JobRecord(BaseModel):
    """Structured fields read from one LinkedIn job posting."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    company: str
    location: str
    description: str
    employment_type: Optional[str] = Field(default=None, alias="employmentType")
    posted_date: Optional[str] = Field(default=None, alias="postedDate")
    requirements: tuple[str, ...] = ()
    skills: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        # Optional fields that were not found are left out, not sent as null
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ScrapeRequest(BaseModel):
    url: Any = None


class ScrapeResponse(BaseModel):
    success: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class HealthResponse(BaseModel):
    status: str = "ok"
