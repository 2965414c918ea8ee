from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from jobrole.models import Role, DayType
from staffrequest.models import RequestType
from .models import EntryStatus

logger = logging.getLogger(__name__)

WEEK_LENGTH = 7
DEFAULT_WEEKEND_OFFSETS = frozenset({4, 5, 6})  # Fri, Sat, Sun for a Monday start
DEFAULT_SHIFT_START = "5 PM"

_REQUEST_STATUS = {
    RequestType.libre: EntryStatus.libre,
    RequestType.unavailable: EntryStatus.unavailable,
    RequestType.vacation: EntryStatus.vacation,
}


@dataclass
class PlannedEntry:
    employee_id: int
    date: date
    status: EntryStatus
    shift_start: Optional[str] = None
    role: Optional[Role] = None


@dataclass(frozen=True)
class Shortfall:
    date: date
    role: Role
    needed: int
    filled: int

    @property
    def missing(self) -> int:
        return self.needed - self.filled


@dataclass(frozen=True)
class CoverageCell:
    date: date
    day_type: DayType
    role: Role
    count: int
    min: int

    @property
    def ok(self) -> bool:
        return self.count >= self.min


@dataclass
class WeekPlan:
    week_start: date
    dates: List[date]
    entries: List[PlannedEntry]
    shortfalls: List[Shortfall] = field(default_factory=list)


# (employee_id, date) -> entry; mutated in place by every phase
WeekIndex = Dict[Tuple[int, date], PlannedEntry]


# ---------- week helpers ----------

def week_dates(week_start: date) -> List[date]:
    return [week_start + timedelta(days=i) for i in range(WEEK_LENGTH)]


def is_week_start(d: date) -> bool:
    return d.weekday() == 0


def day_type(week_start: date, offset: int, weekend_offsets: Iterable[int] = DEFAULT_WEEKEND_OFFSETS) -> DayType:
    """Classify a day by its offset from the week start.

    The offsets only mean Friday to Sunday when week_start is a Monday.
    """
    if not 0 <= offset < WEEK_LENGTH:
        raise ValueError(f"offset {offset} is outside the week")
    return DayType.weekend if offset in set(weekend_offsets) else DayType.weekday


def day_type_for(week_start: date, weekend_offsets: Iterable[int] = DEFAULT_WEEKEND_OFFSETS) -> Callable[[date], DayType]:
    offsets = frozenset(weekend_offsets)

    def _classify(d: date) -> DayType:
        return day_type(week_start, (d - week_start).days, offsets)

    return _classify


def split_week(week_start: date, weekend_offsets: Iterable[int] = DEFAULT_WEEKEND_OFFSETS) -> Tuple[List[date], List[date]]:
    """Return (weekend dates, weekday dates), each in calendar order."""
    classify = day_type_for(week_start, weekend_offsets)
    dates = week_dates(week_start)
    weekend = [d for d in dates if classify(d) == DayType.weekend]
    weekday = [d for d in dates if classify(d) == DayType.weekday]
    return weekend, weekday


# ---------- input normalisation ----------

def _is_active(emp) -> bool:
    return getattr(emp, "status", "active") == "active"


def _rule_minimums(rules) -> Dict[Tuple[Role, DayType], int]:
    return {(Role(r.role), DayType(r.day_type)): int(r.min_staff) for r in rules}


# ---------- phase 1: requests ----------

def apply_requests(index: WeekIndex, requests, dates: Sequence[date], role_of: Mapping[int, Role] | None = None) -> int:
    """Seed the index from requests, in the order given; later requests overwrite earlier ones.

    A VACATION request blocks every day of the week whatever its stored date.
    Returns the number of slots written.
    """
    in_week = set(dates)
    role_of = role_of or {}
    written = 0
    for req in requests:
        if req.date not in in_week:
            continue
        req_type = RequestType(req.type)
        status = _REQUEST_STATUS[req_type]
        targets = dates if req_type == RequestType.vacation else [req.date]
        for d in targets:
            index[(req.employee_id, d)] = PlannedEntry(
                employee_id=req.employee_id,
                date=d,
                status=status,
                role=role_of.get(req.employee_id),
            )
            written += 1
    return written


# ---------- phase 2: coverage ----------

def working_count(index: WeekIndex, d: date, role: Role) -> int:
    return sum(
        1 for e in index.values()
        if e.date == d and e.role == role and e.status == EntryStatus.working
    )


def fill_coverage(
    index: WeekIndex,
    dates: Sequence[date],
    *,
    day_type_of: Callable[[date], DayType],
    employees,
    rules,
    rng: random.Random,
    default_shift_start: str = DEFAULT_SHIFT_START,
) -> List[Shortfall]:
    """
    Greedy fill, one (day, role) at a time in the order of `dates`:
    - needed = minimum - working already on that day; skip when <= 0
    - eligible = active employees of the role with no entry that day
    - shuffle eligible with rng and take the first `needed`
    Returns the (day, role) pairs that could not be fully staffed.
    """
    active = [e for e in employees if _is_active(e)]
    minimums = _rule_minimums(rules)
    roles = sorted({Role(e.role) for e in active}, key=lambda r: r.value)
    shortfalls: List[Shortfall] = []

    for d in dates:
        dtype = day_type_of(d)
        for role in roles:
            needed = minimums.get((role, dtype), 0) - working_count(index, d, role)
            if needed <= 0:
                continue

            # sorted first so a seeded rng reproduces the same picks
            pool = sorted(
                (e for e in active if Role(e.role) == role and (e.id, d) not in index),
                key=lambda e: e.id,
            )
            rng.shuffle(pool)
            picked = pool[:needed]
            for emp in picked:
                index[(emp.id, d)] = PlannedEntry(
                    employee_id=emp.id,
                    date=d,
                    status=EntryStatus.working,
                    shift_start=emp.preferred_start or default_shift_start,
                    role=role,
                )
            if len(picked) < needed:
                shortfalls.append(Shortfall(date=d, role=role, needed=needed, filled=len(picked)))
    return shortfalls


# ---------- phase 3: gaps ----------

def fill_gaps(index: WeekIndex, employees, dates: Sequence[date]) -> int:
    """Give every active employee a LIBRE entry on each day still unassigned."""
    created = 0
    for emp in employees:
        if not _is_active(emp):
            continue
        for d in dates:
            if (emp.id, d) in index:
                continue
            index[(emp.id, d)] = PlannedEntry(
                employee_id=emp.id, date=d, status=EntryStatus.libre, role=Role(emp.role)
            )
            created += 1
    return created


# ---------- evaluation ----------

def evaluate_coverage(
    entries,
    rules,
    dates: Sequence[date],
    day_type_of: Callable[[date], DayType],
    roles: Optional[Iterable[Role]] = None,
) -> Dict[Tuple[date, Role], CoverageCell]:
    """Working count against the minimum for every (day, role); reads only.

    `entries` need employee role information on a `role` attribute.
    """
    minimums = _rule_minimums(rules)
    role_list = list(roles) if roles is not None else list(Role)
    counts: Dict[Tuple[date, Role], int] = {}
    for e in entries:
        if e.status != EntryStatus.working or e.role is None:
            continue
        key = (e.date, Role(e.role))
        counts[key] = counts.get(key, 0) + 1

    report: Dict[Tuple[date, Role], CoverageCell] = {}
    for d in dates:
        dtype = day_type_of(d)
        for role in role_list:
            report[(d, role)] = CoverageCell(
                date=d,
                day_type=dtype,
                role=role,
                count=counts.get((d, role), 0),
                min=minimums.get((role, dtype), 0),
            )
    return report


# ---------- public API ----------

def plan_week(
    week_start: date,
    *,
    employees,
    rules,
    requests,
    rng: Optional[random.Random] = None,
    weekend_offsets: Iterable[int] = DEFAULT_WEEKEND_OFFSETS,
    default_shift_start: str = DEFAULT_SHIFT_START,
) -> WeekPlan:
    """Build a full week: requests, then weekend fill, then weekday fill, then LIBRE for the rest."""
    rng = rng or random.Random()
    dates = week_dates(week_start)
    classify = day_type_for(week_start, weekend_offsets)
    weekend, weekday = split_week(week_start, weekend_offsets)
    role_of = {e.id: Role(e.role) for e in employees}

    index: WeekIndex = {}
    apply_requests(index, requests, dates, role_of)

    shortfalls = fill_coverage(
        index, weekend, day_type_of=classify, employees=employees, rules=rules,
        rng=rng, default_shift_start=default_shift_start,
    )
    shortfalls += fill_coverage(
        index, weekday, day_type_of=classify, employees=employees, rules=rules,
        rng=rng, default_shift_start=default_shift_start,
    )
    fill_gaps(index, employees, dates)

    entries = sorted(index.values(), key=lambda e: (e.date, e.employee_id))
    for s in shortfalls:
        logger.warning("coverage gap %s %s: %d of %d filled", s.date.isoformat(), s.role.value, s.filled, s.needed)
    return WeekPlan(week_start=week_start, dates=dates, entries=entries, shortfalls=shortfalls)
