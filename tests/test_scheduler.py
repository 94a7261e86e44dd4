"""
tests/test_scheduler.py
=======================

DecayScheduler ticks against the real repository, plus failure handling
and the overlap guard with mocked repositories.
"""

from unittest.mock import MagicMock

import pytest

from junglesales.company_repo import CompanyRepository
from junglesales.errors import StoreError
from junglesales.models import GRAVEYARD, Company, CompanyUpdate
from junglesales.scheduler import DecayScheduler
from junglesales.settings import Settings


def _config(**overrides):
    return Settings(**overrides)


def _seed(repo, name, user=1, **fields):
    cid = repo.create(user, name)
    if fields:
        repo.update(name, CompanyUpdate(**fields))
    return cid


# ---------------------------------------------------------------------------
# End‑to‑end scenarios
# ---------------------------------------------------------------------------
def test_scenario_a_decrement(repo):
    cid = _seed(repo, "Acme", time_stamp=5, level=3)
    DecayScheduler(config=_config()).tick()
    c = repo.get(cid)
    assert (c.time_stamp, c.level, c.tier, c.user) == (4, 3, None, 1)


def test_scenario_b_expiry(repo):
    cid = _seed(repo, "Acme", user=7, time_stamp=1, level=3)
    DecayScheduler(config=_config()).tick()
    c = repo.get(cid)
    assert (c.tier, c.user, c.level, c.time_stamp) == (GRAVEYARD, 0, 3, 0)


def test_scenario_c_sentinel_reset(repo):
    cid = _seed(repo, "Acme", time_stamp=1001)
    DecayScheduler(config=_config()).tick()
    c = repo.get(cid)
    assert (c.time_stamp, c.level) == (7, 5)


def test_scenario_d_unenrolled_untouched(repo):
    cid = _seed(repo, "Acme")
    spies = []

    def factory():
        spy = MagicMock(wraps=CompanyRepository())
        spies.append(spy)
        return spy

    report = DecayScheduler(factory, config=_config()).tick()
    spies[0].update.assert_not_called()
    spies[0].upsert.assert_not_called()
    assert report.skipped == 1 and report.updated == 0
    c = repo.get(cid)
    assert c.time_stamp is None and c.level is None


def test_graveyard_company_stays_put_across_ticks(repo):
    cid = _seed(repo, "Acme", time_stamp=2, level=3)
    sched = DecayScheduler(config=_config())
    for _ in range(4):
        sched.tick()
    c = repo.get(cid)
    assert (c.tier, c.user, c.level, c.time_stamp) == (GRAVEYARD, 0, 3, 0)


def test_tick_processes_every_company(repo):
    _seed(repo, "Acme", time_stamp=5)
    _seed(repo, "Globex", time_stamp=1)
    _seed(repo, "Initech")
    report = DecayScheduler(config=_config()).tick()
    assert (report.updated, report.skipped, report.failed) == (2, 1, 0)


def test_tick_closes_repository():
    fake = MagicMock()
    fake.all.return_value = []
    DecayScheduler(lambda: fake, config=_config()).tick()
    fake.close.assert_called_once()


# ---------------------------------------------------------------------------
# Failure handling
# ---------------------------------------------------------------------------
def test_failed_update_does_not_stop_the_tick():
    fake = MagicMock()
    fake.all.return_value = [
        Company("Acme", time_stamp=5),
        Company("Globex", time_stamp=3),
    ]
    fake.update.side_effect = [StoreError("boom"), 1]

    report = DecayScheduler(lambda: fake, config=_config()).tick()

    assert fake.update.call_count == 2
    fake.update.assert_called_with("Globex", CompanyUpdate(time_stamp=2, level=5))
    assert (report.updated, report.failed) == (1, 1)


def test_failed_scan_ends_tick_quietly():
    fake = MagicMock()
    fake.all.side_effect = StoreError("db down")
    report = DecayScheduler(lambda: fake, config=_config()).tick()
    fake.update.assert_not_called()
    assert report.ran and report.updated == 0


def test_unexpected_errors_propagate():
    fake = MagicMock()
    fake.all.side_effect = RuntimeError("bug")
    with pytest.raises(RuntimeError):
        DecayScheduler(lambda: fake, config=_config()).tick()
    fake.close.assert_called_once()


# ---------------------------------------------------------------------------
# Auto‑enroll
# ---------------------------------------------------------------------------
def test_auto_enroll_gives_unenrolled_a_window(repo):
    cid = _seed(repo, "Acme")
    report = DecayScheduler(config=_config(decay_auto_enroll=True, decay_enroll_window=9)).tick()
    assert report.updated == 1
    assert repo.get(cid).time_stamp == 9


# ---------------------------------------------------------------------------
# Overlap guard
# ---------------------------------------------------------------------------
def _reentrant_factory(holder, inner_reports):
    """Repository whose scan starts a second tick, simulating an overlap."""
    started = []

    def factory():
        fake = MagicMock()

        def scan():
            if not started:
                started.append(True)
                inner_reports.append(holder[0].tick())
            return [Company("Acme", time_stamp=5)]

        fake.all.side_effect = scan
        return fake
    return factory


def test_overlapping_tick_is_skipped():
    holder, inner = [], []
    sched = DecayScheduler(_reentrant_factory(holder, inner), config=_config(decay_prevent_overlap=True))
    holder.append(sched)
    outer = sched.tick()
    assert inner[0].ran is False
    assert outer.ran and outer.updated == 1


def test_overlap_allowed_when_guard_disabled():
    holder, inner = [], []
    sched = DecayScheduler(_reentrant_factory(holder, inner), config=_config(decay_prevent_overlap=False))
    holder.append(sched)
    sched.tick()
    assert inner[0].ran is True and inner[0].updated == 1


# ---------------------------------------------------------------------------
# Daily trigger
# ---------------------------------------------------------------------------
def test_schedule_daily_registers_one_job():
    sched = DecayScheduler(config=_config(decay_at="06:30"))
    sched.schedule_daily()
    job = sched.schedule_daily()
    assert sched._jobs.get_jobs() == [job]
    assert job.unit == "days"
    assert job.at_time.strftime("%H:%M") == "06:30"


def test_start_and_stop_background_thread():
    sched = DecayScheduler(config=_config(decay_poll_seconds=0.01))
    thread = sched.start()
    assert thread.is_alive()
    assert sched.start() is thread
    sched.stop(timeout=2)
    assert not thread.is_alive()


# ---------------------------------------------------------------------------
# Logging and vanished records
# ---------------------------------------------------------------------------
def test_one_log_line_per_updated_company(repo, caplog):
    _seed(repo, "Acme", time_stamp=5)
    _seed(repo, "Globex", time_stamp=1)
    _seed(repo, "Initech")
    with caplog.at_level("INFO", logger="junglesales.scheduler"):
        DecayScheduler(config=_config()).tick()
    updated = [r.getMessage() for r in caplog.records if r.getMessage().endswith("was updated")]
    assert sorted(updated) == ["Acme was updated", "Globex was updated"]


def test_update_matching_nothing_is_not_counted(caplog):
    """A company renamed or deleted after the scan is skipped, not reported as updated."""
    fake = MagicMock()
    fake.all.return_value = [Company("Acme", time_stamp=5)]
    fake.update.return_value = 0

    with caplog.at_level("INFO", logger="junglesales.scheduler"):
        report = DecayScheduler(lambda: fake, config=_config()).tick()

    assert (report.updated, report.skipped, report.failed) == (0, 1, 0)
    assert not any(r.getMessage() == "Acme was updated" for r in caplog.records)
    assert any(r.levelname == "WARNING" and "Acme" in r.getMessage() for r in caplog.records)


def test_sentinel_reset_ignores_enroll_window(repo):
    cid = _seed(repo, "Acme", time_stamp=1001)
    DecayScheduler(config=_config(decay_enroll_window=30)).tick()
    assert repo.get(cid).time_stamp == 7
