from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin
from jobly.core.exceptions import BadRequestError
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyDeletedResponse,
    CompanyDetailSingleResponse,
    CompanyListResponse,
    CompanySearchQuery,
    CompanySingleResponse,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


def parse_search_query(request: Request) -> CompanySearchQuery:
    """Validate the company search query string; bad input is a 400."""
    try:
        return CompanySearchQuery.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise BadRequestError([f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()])


@router.post("", status_code=201, response_model=CompanySingleResponse, dependencies=[Depends(ensure_admin)])
def create_company(request: CompanyCreateRequest, db: Session = Depends(get_db)):
    """
    Create a company.

    Authorization required: admin
    """
    company = company_crud.create(db, request.model_dump(by_alias=True))
    return {"company": company}


@router.get("", response_model=CompanyListResponse)
def list_companies(
    search: CompanySearchQuery = Depends(parse_search_query),
    db: Session = Depends(get_db)
):
    """
    List companies, ordered by name.

    Optional filters: nameLike (case-insensitive substring), minEmployees,
    maxEmployees.

    Authorization required: none
    """
    companies = company_crud.find_all(db, search.model_dump(by_alias=True, exclude_none=True))
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailSingleResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Retrieve a company with its jobs.

    Authorization required: none
    """
    return {"company": company_crud.get(db, handle)}


@router.patch("/{handle}", response_model=CompanySingleResponse, dependencies=[Depends(ensure_admin)])
def update_company(handle: str, request: CompanyUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a company. The handle cannot change.

    Authorization required: admin
    """
    company = company_crud.update(db, handle, request.model_dump(by_alias=True, exclude_unset=True))
    return {"company": company}


@router.delete("/{handle}", response_model=CompanyDeletedResponse, dependencies=[Depends(ensure_admin)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    """
    Delete a company and its jobs.

    Authorization required: admin
    """
    company_crud.remove(db, handle)
    return {"deleted": handle}
