from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin
from jobly.core.exceptions import BadRequestError
from jobly.crud import job as job_crud
from jobly.schemas.job import (
    JobCreateRequest,
    JobDeletedResponse,
    JobListResponse,
    JobSearchQuery,
    JobSingleResponse,
    JobUpdateRequest,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def parse_search_query(request: Request) -> JobSearchQuery:
    """
    Validate the job search query string.

    Unknown parameters and values of the wrong type are a 400.
    """
    try:
        return JobSearchQuery.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise BadRequestError([f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()])


@router.post("", status_code=201, response_model=JobSingleResponse, dependencies=[Depends(ensure_admin)])
def create_job(request: JobCreateRequest, db: Session = Depends(get_db)):
    """
    Create a job posting for an existing company.

    Authorization required: admin
    """
    job = job_crud.create(db, request.model_dump(by_alias=True))
    return {"job": job}


@router.get("", response_model=JobListResponse)
def list_jobs(
    search: JobSearchQuery = Depends(parse_search_query),
    db: Session = Depends(get_db)
):
    """
    List jobs, ordered by id.

    Optional filters:
    - title: case-insensitive substring match
    - minSalary: salary at least this much
    - hasEquity: true keeps only jobs with equity > 0; false does not filter

    Authorization required: none
    """
    jobs = job_crud.find_all(db, search.model_dump(by_alias=True, exclude_none=True))
    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobSingleResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.

    Authorization required: none
    """
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", response_model=JobSingleResponse, dependencies=[Depends(ensure_admin)])
def update_job(job_id: int, request: JobUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a job. Only title, salary and equity can change.

    Authorization required: admin
    """
    job = job_crud.update(db, job_id, request.model_dump(by_alias=True, exclude_unset=True))
    return {"job": job}


@router.delete("/{job_id}", response_model=JobDeletedResponse, dependencies=[Depends(ensure_admin)])
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID.

    Authorization required: admin
    """
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
