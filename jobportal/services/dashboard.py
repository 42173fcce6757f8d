from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from jobportal.core.errors import ValidationError
from jobportal.entities import ENTITIES
from jobportal.models import Employer, FacultyUser, Job

CHART_PERIODS = ("day", "week", "month", "year")


def _count(db: Session, model: type, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return int(db.execute(stmt).scalar_one() or 0)


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _as_utc_date(value: datetime) -> date:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).date()


def summary(db: Session) -> dict[str, int]:
    return {config.name: _count(db, config.model) for config in ENTITIES}


def user_chart(db: Session, *, today: date | None = None) -> dict[str, int]:
    day = today or datetime.now(timezone.utc).date()
    return {
        "total_faculty_users": _count(db, FacultyUser),
        "total_today_faculty_users": _count(
            db,
            FacultyUser,
            FacultyUser.created_at >= _start_of_day(day),
            FacultyUser.created_at < _start_of_day(day + timedelta(days=1)),
        ),
        "total_incomplete_faculty_users": _count(
            db,
            FacultyUser,
            or_(
                FacultyUser.image.is_(None),
                FacultyUser.image == "",
                FacultyUser.mobile.is_(None),
                FacultyUser.mobile == "",
            ),
        ),
    }


def job_chart(db: Session) -> dict[str, int]:
    return {
        "total_jobs": _count(db, Job),
        "total_open_jobs": _count(db, Job, Job.status == "open"),
        "total_drafted_jobs": _count(db, Job, Job.draft_status == "yes"),
        "total_approval_jobs": _count(db, Job, Job.approval_status == 1),
    }


def _add_months(day: date, months: int) -> date:
    index = day.month - 1 + months
    return date(day.year + index // 12, index % 12 + 1, 1)


def _period_buckets(period: str, today: date) -> tuple[list[tuple[Any, str]], Callable[[date], Any], date, date]:
    if period == "day":
        start = today.replace(day=1)
        days = [start + timedelta(days=i) for i in range((today - start).days + 1)]
        return [(d, f"{d.day} {d:%b}") for d in days], (lambda d: d), start, today + timedelta(days=1)
    if period == "week":
        start = today - timedelta(days=today.weekday())
        days = [start + timedelta(days=i) for i in range(7)]
        return [(d, f"{d:%a} {d.day} {d:%b}") for d in days], (lambda d: d), start, start + timedelta(days=7)
    if period == "month":
        start = date(today.year, 1, 1)
        months = [_add_months(start, i) for i in range(12)]
        return [((m.year, m.month), f"{m:%b %Y}") for m in months], (lambda d: (d.year, d.month)), start, date(today.year + 1, 1, 1)
    if period == "year":
        years = list(range(today.year - 9, today.year + 1))
        return [(y, str(y)) for y in years], (lambda d: d.year), date(years[0], 1, 1), date(today.year + 1, 1, 1)
    raise ValidationError("Invalid filter")


def _created_dates(db: Session, column, start: date, end: date) -> list[date]:
    stmt = select(column).where(column >= _start_of_day(start), column < _start_of_day(end))
    return [_as_utc_date(value) for value in db.execute(stmt).scalars().all() if value is not None]


def employer_job_chart(db: Session, period: str | None, *, today: date | None = None) -> list[dict[str, Any]]:
    """New employers and new jobs per bucket of the requested period."""
    day = today or datetime.now(timezone.utc).date()
    buckets, key_of, start, end = _period_buckets(str(period or "").strip().lower(), day)

    employers = Counter(key_of(d) for d in _created_dates(db, Employer.created_at, start, end))
    jobs = Counter(key_of(d) for d in _created_dates(db, Job.created_at, start, end))
    return [{"time": label, "employers": employers.get(key, 0), "jobs": jobs.get(key, 0)} for key, label in buckets]
