"""
Tests for the daily batch jobs and their entry points.

Verifies:
- Rotation only touches periods that ended and is safe to re-run
- Scoring writes one snapshot per active user and run date
- Job endpoints require the scheduler's bearer token and stay disabled until one is configured
- The command-line runner parses its arguments and reports failures
"""

import uuid

import pytest
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import Settings, settings
from domain.enums import PeriodStatus
from repositories.metric_repository import MetricRepository
from repositories.period_repository import PeriodRepository
from scripts import run_daily_jobs
from services.job_service import JobService
from test_constants import (
    JOB_TOKEN,
    MONDAY,
    NEXT_MONDAY,
    NEXT_TUESDAY,
    SUNDAY,
    WEDNESDAY,
)
from test_fixtures import client, create_period, create_profile, log_days


def job_headers(token: str = JOB_TOKEN):
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# JOB SERVICE
# =============================================================================


def test_rotate_all_rotates_ended_periods(db_session: Session):
    ended = uuid.uuid4()
    running = uuid.uuid4()
    create_period(db_session, ended, MONDAY)
    create_period(db_session, running, NEXT_MONDAY)

    result = JobService.rotate_all(db_session, NEXT_TUESDAY)

    assert result.job == "rotate_periods"
    assert result.processed == 1
    assert result.failed == 0
    assert result.results[0]["user_id"] == str(ended)
    assert result.results[0]["outcome"] == "rotated"
    assert result.results[0]["week_start_date"] == NEXT_MONDAY.isoformat()

    repo = PeriodRepository(db_session)
    assert repo.get_active(ended).week_start_date == NEXT_MONDAY
    assert repo.get_for_week(ended, MONDAY).status == PeriodStatus.COMPLETED


def test_rotate_all_rerun_is_noop(db_session: Session):
    user_id = uuid.uuid4()
    create_period(db_session, user_id, MONDAY)

    JobService.rotate_all(db_session, NEXT_MONDAY)
    again = JobService.rotate_all(db_session, NEXT_MONDAY)

    assert again.processed == 0
    assert len(PeriodRepository(db_session).get_by_user_id(user_id)) == 2


def test_score_all_writes_snapshots(db_session: Session):
    user_id = create_profile(db_session)
    period = create_period(db_session, user_id, MONDAY)
    log_days(db_session, user_id, MONDAY, [2100, 1900])

    result = JobService.score_all(db_session, WEDNESDAY)
    JobService.score_all(db_session, WEDNESDAY)

    assert result.job == "daily_metrics"
    assert result.succeeded == 1
    assert result.results[0]["date"] == WEDNESDAY.isoformat()
    snapshots = MetricRepository(db_session).get_by_period(period.period_id)
    assert [s.calculated_date for s in snapshots] == [WEDNESDAY]


def test_score_all_skips_dates_outside_the_period(db_session: Session):
    create_period(db_session, uuid.uuid4(), NEXT_MONDAY)

    result = JobService.score_all(db_session, SUNDAY)

    assert result.processed == 0
    assert result.failed == 0


# =============================================================================
# JOB ENDPOINTS
# =============================================================================


@pytest.mark.parametrize("path", ["/jobs/rotate-periods", "/jobs/daily-metrics"])
def test_job_endpoints_require_token(db_session: Session, path):
    missing = client.post(path)
    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "MISSING_JOB_TOKEN"

    wrong = client.post(path, headers=job_headers("not-the-token"))
    assert wrong.status_code == 401
    assert wrong.json()["error"]["code"] == "INVALID_JOB_TOKEN"


def test_job_endpoints_disabled_without_configured_token(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "job_token", "")

    r = client.post("/jobs/rotate-periods", headers=job_headers(""))
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "JOB_TOKEN_NOT_CONFIGURED"

    r = client.post("/jobs/daily-metrics", headers={"Authorization": "Bearer change-me"})
    assert r.status_code == 401


def test_job_token_has_no_usable_default(monkeypatch):
    monkeypatch.delenv("JOB_TOKEN", raising=False)

    assert Settings(_env_file=None, environment="development").job_token == ""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, environment="production")
    assert Settings(_env_file=None, environment="production", job_token="s3cret").is_production()


def test_rotate_endpoint(db_session: Session):
    user_id = uuid.uuid4()
    create_period(db_session, user_id, MONDAY)

    r = client.post(
        "/jobs/rotate-periods",
        params={"run_date": NEXT_TUESDAY.isoformat()},
        headers=job_headers(),
    )

    assert r.status_code == 200
    body = r.json()
    assert body["job"] == "rotate_periods"
    assert body["run_date"] == NEXT_TUESDAY.isoformat()
    assert body["succeeded"] == 1


def test_daily_metrics_endpoint(db_session: Session):
    user_id = create_profile(db_session)
    create_period(db_session, user_id, MONDAY)

    r = client.post(
        "/jobs/daily-metrics",
        params={"run_date": WEDNESDAY.isoformat()},
        headers=job_headers(),
    )

    assert r.status_code == 200
    assert r.json()["processed"] == 1


# =============================================================================
# COMMAND-LINE RUNNER
# =============================================================================


def test_runner_parse_args():
    args = run_daily_jobs.parse_args(["--date", "2025-01-14", "--job", "rotate"])
    assert args.date == NEXT_TUESDAY
    assert args.job == "rotate"

    defaults = run_daily_jobs.parse_args([])
    assert defaults.date is None
    assert defaults.job == "all"


def test_runner_rejects_bad_date():
    with pytest.raises(SystemExit):
        run_daily_jobs.parse_args(["--date", "14/01/2025"])


def test_runner_main_runs_all_jobs(db_session: Session):
    user_id = create_profile(db_session)
    create_period(db_session, user_id, MONDAY)

    assert run_daily_jobs.main(["--date", NEXT_TUESDAY.isoformat()]) == 0

    period = PeriodRepository(db_session).get_active(user_id)
    assert period.week_start_date == NEXT_MONDAY
    assert MetricRepository(db_session).get_by_period(period.period_id)
