from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobportal.db.session import get_db
from jobportal.schemas.envelope import success_response
from jobportal.services.dashboard import employer_job_chart, job_chart, summary, user_chart

router = APIRouter()


@router.get("")
def dashboard_summary(db: Session = Depends(get_db)):
    return success_response("Dashboard fetched successfully", summary(db))


@router.get("/user-chart")
def dashboard_user_chart(db: Session = Depends(get_db)):
    return success_response("User chart fetched successfully", user_chart(db))


@router.get("/job-chart")
def dashboard_job_chart(db: Session = Depends(get_db)):
    return success_response("Job chart fetched successfully", job_chart(db))


@router.get("/employer-job-chart")
def dashboard_employer_job_chart(filter: str | None = Query(None), db: Session = Depends(get_db)):
    return success_response("Employer job chart fetched successfully", employer_job_chart(db, filter))
