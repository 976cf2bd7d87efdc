import time
from datetime import datetime

import schedule

from tubebatch.config import T, E
from tubebatch.quota import reset_quota_usage

POLL_INTERVAL_SECONDS = 60

def schedule_daily(job, at_time, timezone, translator, scheduler=None):
    """Registers `job` to fire once a day at `at_time` (HH:MM) in `timezone`."""
    if scheduler is None:
        scheduler = schedule.default_scheduler

    def fire():
        print(translator.get('scheduler.fired', T_HEADER=T.HEADER, E_CLOCK=E.CLOCK, now=datetime.now().isoformat(timespec='seconds')))
        reset_quota_usage()
        job()

    scheduled_job = scheduler.every().day.at(at_time, timezone).do(fire)
    print(translator.get('scheduler.registered', T_INFO=T.INFO, E_CLOCK=E.CLOCK, at_time=at_time, timezone=timezone, next_run=scheduled_job.next_run))
    return scheduled_job

def run_forever(scheduler=None, poll_interval=POLL_INTERVAL_SECONDS, sleep=time.sleep):
    """Polls for due jobs until interrupted. Errors raised by a job propagate."""
    if scheduler is None:
        scheduler = schedule.default_scheduler
    while True:
        scheduler.run_pending()
        sleep(poll_interval)
