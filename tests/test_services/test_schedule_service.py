import csv
import gc
import io
import os
import random
import tempfile
import threading
import time
import unittest
from datetime import date, timedelta
from unittest.mock import patch

from fastapi import HTTPException
from sqlalchemy import create_engine, select, func
from sqlalchemy.orm import sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401
from employee.models import Employee, EmployeeStatus
from jobrole.models import Role, DayType
from staffing.models import CoverageRule
from staffrequest.models import StaffRequest, RequestType
from schedule.models import ScheduleEntry, EntryStatus
from schedule.schema import ScheduleEntryUpdatePayload
from schedule import service, generator

MONDAY = date(2025, 3, 3)
FRIDAY = MONDAY + timedelta(days=4)


class ScheduleServiceTests(unittest.TestCase):
    def setUp(self):
        # fresh in-memory DB for each test
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True, expire_on_commit=False)
        self.db = Session()

        self.waiters = [Employee(name=f"Waiter{i}", role=Role.WAIT) for i in range(1, 5)]
        self.host = Employee(name="Hanna", role=Role.HOST, preferred_start="4 PM")
        self.away = Employee(name="Away", role=Role.WAIT, status=EmployeeStatus.vacation)
        self.db.add_all([*self.waiters, self.host, self.away])
        self.db.add_all([
            CoverageRule(role=Role.WAIT, day_type=DayType.weekday, min_staff=2),
            CoverageRule(role=Role.WAIT, day_type=DayType.weekend, min_staff=3),
            CoverageRule(role=Role.HOST, day_type=DayType.weekday, min_staff=1),
            CoverageRule(role=Role.HOST, day_type=DayType.weekend, min_staff=1),
        ])
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _count_entries(self):
        return self.db.scalar(select(func.count()).select_from(ScheduleEntry))

    # ---------- generate_schedule ----------
    def test_generate_writes_one_entry_per_active_employee_per_day(self):
        result = service.generate_schedule(self.db, MONDAY, rng=random.Random(1))

        self.assertEqual(result["created"], 35)
        self.assertEqual(result["replaced"], 0)
        self.assertEqual(result["shortfalls"], [])
        rows = service.get_week_entries(self.db, MONDAY)
        self.assertEqual(len(rows), 35)
        self.assertNotIn(self.away.id, {r.employee_id for r in rows})

        per_day = {}
        for r in rows:
            if r.status == EntryStatus.working and r.role == Role.WAIT:
                per_day[r.date] = per_day.get(r.date, 0) + 1
        self.assertEqual([per_day[MONDAY + timedelta(days=i)] for i in range(7)], [2, 2, 2, 2, 3, 3, 3])

        host_days = [r for r in rows if r.employee_id == self.host.id]
        self.assertTrue(all(r.shift_start == "4 PM" for r in host_days))

    def test_regenerate_replaces_the_week(self):
        service.generate_schedule(self.db, MONDAY)
        result = service.generate_schedule(self.db, MONDAY)

        self.assertEqual(result["replaced"], 35)
        self.assertEqual(self._count_entries(), 35)

    def test_generate_leaves_other_weeks_alone(self):
        next_monday = MONDAY + timedelta(days=7)
        self.db.add(ScheduleEntry(employee_id=self.host.id, date=next_monday, status=EntryStatus.libre))
        self.db.commit()

        service.generate_schedule(self.db, MONDAY)

        self.assertIsNotNone(service.get_entry(self.db, self.host.id, next_monday))

    def test_generate_applies_vacation_request_to_whole_week(self):
        self.db.add(StaffRequest(employee_id=self.waiters[0].id, date=MONDAY + timedelta(days=2), type=RequestType.vacation))
        self.db.commit()

        result = service.generate_schedule(self.db, MONDAY, rng=random.Random(5))

        rows = [r for r in service.get_week_entries(self.db, MONDAY) if r.employee_id == self.waiters[0].id]
        self.assertEqual([r.status for r in rows], [EntryStatus.vacation] * 7)
        # three waiters left for a weekend minimum of three
        self.assertEqual(result["shortfalls"], [])

    def test_generate_reports_shortfalls(self):
        self.db.add_all([
            StaffRequest(employee_id=self.waiters[0].id, date=FRIDAY, type=RequestType.unavailable),
            StaffRequest(employee_id=self.waiters[1].id, date=FRIDAY, type=RequestType.libre),
        ])
        self.db.commit()

        result = service.generate_schedule(self.db, MONDAY)

        self.assertEqual(result["shortfalls"], [{"date": FRIDAY, "role": Role.WAIT, "needed": 3, "filled": 2}])
        friday = {r.employee_id: r for r in service.get_week_entries(self.db, MONDAY) if r.date == FRIDAY}
        self.assertEqual(friday[self.waiters[0].id].status, EntryStatus.unavailable)
        self.assertEqual(friday[self.waiters[1].id].status, EntryStatus.libre)

    def test_generate_rejects_non_monday(self):
        with self.assertRaises(HTTPException) as cm:
            service.generate_schedule(self.db, MONDAY + timedelta(days=1))
        self.assertEqual(cm.exception.status_code, 422)
        self.assertEqual(self._count_entries(), 0)

    def test_dry_run_does_not_write(self):
        result = service.generate_schedule(self.db, MONDAY, dry_run=True)

        self.assertTrue(result["dry_run"])
        self.assertEqual(result["created"], 35)
        self.assertEqual(self._count_entries(), 0)

    def test_failed_rebuild_keeps_previous_week(self):
        service.generate_schedule(self.db, MONDAY, rng=random.Random(2))
        before = {(r.employee_id, r.date, r.status) for r in service.get_week_entries(self.db, MONDAY)}

        with patch.object(self.db, "add_all", side_effect=RuntimeError("storage unavailable")):
            with self.assertRaises(RuntimeError):
                service.generate_schedule(self.db, MONDAY)

        after = {(r.employee_id, r.date, r.status) for r in service.get_week_entries(self.db, MONDAY)}
        self.assertEqual(before, after)

    def test_week_lock_is_per_week(self):
        lock = service._week_lock(MONDAY)
        self.assertIs(lock, service._week_lock(MONDAY))
        self.assertIsNot(lock, service._week_lock(MONDAY + timedelta(days=7)))

    def test_week_lock_released_when_unused(self):
        weeks = [MONDAY + timedelta(days=7 * i) for i in range(100, 150)]
        for w in weeks:
            with service._week_lock(w):
                pass
        gc.collect()
        self.assertFalse(any(w in service._week_locks for w in weeks))

        held = service._week_lock(weeks[0])
        self.assertIn(weeks[0], service._week_locks)
        self.assertIs(held, service._week_lock(weeks[0]))

    # ---------- upsert_entry ----------
    def test_upsert_entry_creates_then_updates_same_row(self):
        emp_id = self.waiters[0].id
        created = service.upsert_entry(
            self.db, ScheduleEntryUpdatePayload(employee_id=emp_id, date=MONDAY, status=EntryStatus.working)
        )
        self.assertEqual(created.shift_start, "5 PM")

        updated = service.upsert_entry(
            self.db,
            ScheduleEntryUpdatePayload(employee_id=emp_id, date=MONDAY, status=EntryStatus.libre, shift_start="9 AM"),
        )
        self.assertEqual(updated.id, created.id)
        self.assertEqual(updated.status, EntryStatus.libre)
        self.assertIsNone(updated.shift_start)
        self.assertEqual(self._count_entries(), 1)

    def test_upsert_entry_working_uses_given_or_preferred_start(self):
        row = service.upsert_entry(
            self.db, ScheduleEntryUpdatePayload(employee_id=self.host.id, date=MONDAY, status=EntryStatus.working)
        )
        self.assertEqual(row.shift_start, "4 PM")
        row = service.upsert_entry(
            self.db,
            ScheduleEntryUpdatePayload(employee_id=self.host.id, date=MONDAY, status=EntryStatus.working, shift_start="6 PM"),
        )
        self.assertEqual(row.shift_start, "6 PM")

    def test_upsert_entry_unknown_employee_404(self):
        with self.assertRaises(HTTPException) as cm:
            service.upsert_entry(
                self.db, ScheduleEntryUpdatePayload(employee_id=9999, date=MONDAY, status=EntryStatus.libre)
            )
        self.assertEqual(cm.exception.status_code, 404)

    # ---------- reports ----------
    def test_coverage_report_lists_gaps(self):
        service.upsert_entry(
            self.db, ScheduleEntryUpdatePayload(employee_id=self.host.id, date=MONDAY, status=EntryStatus.working)
        )

        report = service.coverage_report(self.db, MONDAY)

        self.assertEqual(len(report["cells"]), 7 * len(Role))
        monday_host = next(c for c in report["cells"] if c["date"] == MONDAY and c["role"] == Role.HOST)
        self.assertEqual((monday_host["count"], monday_host["min"], monday_host["ok"]), (1, 1, True))
        gap_keys = {(c["date"], c["role"]) for c in report["gaps"]}
        self.assertIn((MONDAY, Role.WAIT), gap_keys)
        self.assertNotIn((MONDAY, Role.HOST), gap_keys)
        self.assertNotIn((MONDAY, Role.BART), gap_keys)

    def test_fairness_report_labels(self):
        busy = self.waiters[0]
        for i in range(4, 7):
            service.upsert_entry(
                self.db,
                ScheduleEntryUpdatePayload(employee_id=busy.id, date=MONDAY + timedelta(days=i), status=EntryStatus.working),
            )
        service.upsert_entry(
            self.db, ScheduleEntryUpdatePayload(employee_id=self.host.id, date=FRIDAY, status=EntryStatus.working)
        )
        # weekday work does not count
        service.upsert_entry(
            self.db, ScheduleEntryUpdatePayload(employee_id=self.waiters[1].id, date=MONDAY, status=EntryStatus.working)
        )

        rows = service.fairness_report(self.db, MONDAY)

        self.assertEqual(rows[0]["id"], busy.id)
        self.assertEqual((rows[0]["weekend_shifts"], rows[0]["label"]), (3, "High Load"))
        by_id = {r["id"]: r for r in rows}
        self.assertEqual((by_id[self.host.id]["weekend_shifts"], by_id[self.host.id]["label"]), (1, None))
        self.assertEqual(by_id[self.waiters[1].id]["label"], "Resting")

    def test_export_week_csv(self):
        service.generate_schedule(self.db, MONDAY, rng=random.Random(9))

        rows = list(csv.reader(io.StringIO(service.export_week_csv(self.db, MONDAY))))

        self.assertEqual(rows[0], ["Name", "Role", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun", "Total Days"])
        self.assertEqual(len(rows), 1 + 6)
        hanna = next(r for r in rows if r[0] == "Hanna")
        self.assertEqual(hanna[1], "Host / Cashier")
        self.assertEqual(hanna[2:9], ["4 PM"] * 7)
        self.assertEqual(hanna[9], "7")
        away = next(r for r in rows if r[0] == "Away")
        self.assertEqual(away[2:9], ["LIBRE"] * 7)
        self.assertEqual(away[9], "0")



class ConcurrentGenerateTests(unittest.TestCase):
    """Two sessions on a file-backed database rebuilding the same week at once."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        path = os.path.join(self.tmpdir.name, "roster.db")
        self.engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"check_same_thread": False, "timeout": 30},
            future=True,
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine, future=True, expire_on_commit=False)

        with self.Session() as db:
            db.add_all([Employee(name=f"Waiter{i}", role=Role.WAIT) for i in range(1, 5)])
            db.add(CoverageRule(role=Role.WAIT, day_type=DayType.weekend, min_staff=2))
            db.commit()

    def tearDown(self):
        self.engine.dispose()
        self.tmpdir.cleanup()

    def test_same_week_runs_are_serialised(self):
        real_plan = generator.plan_week

        # widen the window between reading the week and writing it
        def slow_plan(*args, **kwargs):
            time.sleep(0.2)
            return real_plan(*args, **kwargs)

        results, errors = [], []

        def run(seed):
            with self.Session() as db:
                try:
                    results.append(service.generate_schedule(db, MONDAY, rng=random.Random(seed)))
                except Exception as exc:
                    errors.append(exc)

        with patch("schedule.service.generator.plan_week", side_effect=slow_plan):
            threads = [threading.Thread(target=run, args=(seed,)) for seed in (1, 2)]
            for t in threads:
                t.start()
            for t in threads:
                t.join(timeout=30)

        self.assertEqual(errors, [])
        self.assertEqual(sorted(r["replaced"] for r in results), [0, 28])
        with self.Session() as db:
            total = db.scalar(select(func.count()).select_from(ScheduleEntry))
            per_slot = db.execute(
                select(ScheduleEntry.employee_id, ScheduleEntry.date, func.count())
                .group_by(ScheduleEntry.employee_id, ScheduleEntry.date)
                .having(func.count() > 1)
            ).all()
        self.assertEqual(total, 4 * 7)
        self.assertEqual(per_slot, [])


if __name__ == "__main__":
    unittest.main()
