from snow_forecast.config import SchedulerConfig
from snow_forecast.scheduler import REFRESH_JOB_ID, build_scheduler


def test_disabled_scheduler_is_not_built():
    assert build_scheduler(lambda: None, SchedulerConfig(enabled=False)) is None


def test_scheduler_registers_refresh_job():
    scheduler = build_scheduler(lambda: None, SchedulerConfig(cron="*/10 * * * *", enabled=True))

    job = scheduler.get_job(REFRESH_JOB_ID)
    assert job is not None
    assert job.max_instances == 1
    assert job.coalesce is True


def test_misfire_grace_time_comes_from_config():
    scheduler = build_scheduler(lambda: None, SchedulerConfig(misfire_grace_time=42))

    assert scheduler.get_job(REFRESH_JOB_ID).misfire_grace_time == 42


def test_run_on_start_schedules_an_immediate_refresh():
    scheduler = build_scheduler(lambda: None, SchedulerConfig(run_on_start=True))

    job = scheduler.get_job(REFRESH_JOB_ID)
    assert getattr(job, "next_run_time", None) is not None
