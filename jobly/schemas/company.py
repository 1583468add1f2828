from pydantic import BaseModel, Field, ValidationInfo, field_validator
from typing import List, Optional


class CompanyCreateRequest(BaseModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees", ge=0)
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        extra = "forbid"
        populate_by_name = True


class CompanyUpdateRequest(BaseModel):
    """Schema for a partial company update; the handle cannot change"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, alias="numEmployees", ge=0)
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        extra = "forbid"
        populate_by_name = True

    @field_validator("name", "description")
    @classmethod
    def required_columns_not_null(cls, v: Optional[str], info: ValidationInfo) -> str:
        """name and description may be left out, but not cleared"""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class CompanySearchQuery(BaseModel):
    """Query-string filters for listing companies"""
    name_like: Optional[str] = Field(None, alias="nameLike", min_length=1)
    min_employees: Optional[int] = Field(None, alias="minEmployees", ge=0)
    max_employees: Optional[int] = Field(None, alias="maxEmployees", ge=0)

    class Config:
        extra = "forbid"
        populate_by_name = True


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True


class CompanyJob(BaseModel):
    """A job as listed under its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None


class CompanyDetailResponse(CompanyResponse):
    jobs: List[CompanyJob] = []


class CompanySingleResponse(BaseModel):
    company: CompanyResponse


class CompanyDetailSingleResponse(BaseModel):
    company: CompanyDetailResponse


class CompanyListResponse(BaseModel):
    companies: List[CompanyResponse]


class CompanyDeletedResponse(BaseModel):
    deleted: str
