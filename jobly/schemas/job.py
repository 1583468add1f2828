from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

# Equity is a fraction between 0 and 1, sent as a string to keep it exact
EQUITY_PATTERN = r"^(0(\.\d+)?|1(\.0+)?)$"


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = Field(None, pattern=EQUITY_PATTERN)
    company_handle: str = Field(..., alias="companyHandle", min_length=1, max_length=25)

    class Config:
        extra = "forbid"
        populate_by_name = True


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    Only title, salary and equity may change; id and companyHandle are
    rejected as unknown fields.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = Field(None, pattern=EQUITY_PATTERN)

    class Config:
        extra = "forbid"

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        """title may be left out, but not cleared"""
        if v is None:
            raise ValueError("title cannot be null")
        return v


class JobSearchQuery(BaseModel):
    """Query-string filters for listing jobs"""
    title: Optional[str] = Field(None, min_length=1)
    min_salary: Optional[int] = Field(None, alias="minSalary", ge=0)
    has_equity: Optional[bool] = Field(None, alias="hasEquity")

    class Config:
        extra = "forbid"
        populate_by_name = True


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None
    company_handle: str = Field(..., alias="companyHandle")

    class Config:
        populate_by_name = True


class JobSingleResponse(BaseModel):
    job: JobResponse


class JobListResponse(BaseModel):
    jobs: List[JobResponse]


class JobDeletedResponse(BaseModel):
    deleted: int
