import datetime
import pytest
import schedule
from unittest.mock import MagicMock
from tubebatch.scheduler import schedule_daily, run_forever

@pytest.fixture
def mock_translator():
    """Fixture to mock the Translator class."""
    translator = MagicMock()
    translator.get.side_effect = lambda key, **kwargs: key
    return translator

@pytest.fixture
def scheduler():
    return schedule.Scheduler()

def test_schedule_daily_registers_one_job(scheduler, mock_translator):
    job = MagicMock()

    scheduled = schedule_daily(job, "20:00", "Asia/Kolkata", mock_translator, scheduler=scheduler)

    assert scheduler.jobs == [scheduled]
    assert scheduled.unit == 'days'
    assert scheduled.interval == 1
    assert scheduled.at_time == datetime.time(20, 0)
    assert scheduled.next_run is not None
    job.assert_not_called()

def test_scheduled_job_resets_quota_and_runs(scheduler, mock_translator):
    from tubebatch import quota
    quota._QUOTA_USAGE = 5000
    job = MagicMock()

    scheduled = schedule_daily(job, "06:30", "UTC", mock_translator, scheduler=scheduler)
    scheduled.job_func()

    job.assert_called_once_with()
    assert quota.get_total_quota_usage() == 0

def test_run_forever_polls_until_interrupted():
    scheduler = MagicMock()
    sleep = MagicMock(side_effect=[None, KeyboardInterrupt])

    with pytest.raises(KeyboardInterrupt):
        run_forever(scheduler=scheduler, poll_interval=5, sleep=sleep)

    assert scheduler.run_pending.call_count == 2
    sleep.assert_called_with(5)

def test_run_forever_propagates_job_errors():
    scheduler = MagicMock()
    scheduler.run_pending.side_effect = RuntimeError("dataset unreachable")

    with pytest.raises(RuntimeError):
        run_forever(scheduler=scheduler, sleep=MagicMock())
