"""
FMCSA Hours of Service (HOS) status calculation.

Rules evaluated for property-carrying drivers:
1. 11-hour driving limit per calendar day
2. 14-hour on-duty limit per calendar day
3. 70-hour on-duty limit over the trailing cycle window
4. 34-hour restart eligibility
5. 30-minute break after 8 hours of cumulative driving

Everything here is a pure function of the duty-status entries, the evaluation
time and the reference time zone. Callers supply ``now`` explicitly; nothing in
this module reads the clock.

References:
- https://www.fmcsa.dot.gov/regulations/hours-of-service
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Any, Iterable


class DutyStatus(str, Enum):
    """Driver duty status as defined by FMCSA."""
    OFF_DUTY = "off_duty"
    SLEEPER_BERTH = "sleeper_berth"
    DRIVING = "driving"
    ON_DUTY_NOT_DRIVING = "on_duty_not_driving"


ON_DUTY_STATUSES = frozenset({DutyStatus.DRIVING, DutyStatus.ON_DUTY_NOT_DRIVING})

# Limits in minutes
DAILY_DRIVE_LIMIT    = 11 * 60
DAILY_ON_DUTY_LIMIT  = 14 * 60
CYCLE_LIMIT          = 70 * 60
RESTART_MINUTES      = 34 * 60
BREAK_REQUIRED_AFTER = 8 * 60
BREAK_MINUTES        = 30


@dataclass(frozen=True)
class HOSConfig:
    """
    Rule parameters. Defaults are the federal property-carrier limits.

    ``clip_to_window`` controls entries that straddle a window boundary
    (midnight, or the start of the cycle window): when True only the part
    inside the window counts, when False the entry counts in full if it
    starts inside the window and not at all otherwise.

    ``truncate_at_now`` evaluates the log as it stood at ``now``: entries that
    start at or after ``now`` are ignored and running entries end at ``now``.
    """
    drive_limit: float = DAILY_DRIVE_LIMIT
    on_duty_limit: float = DAILY_ON_DUTY_LIMIT
    cycle_limit: float = CYCLE_LIMIT
    cycle_window: timedelta = timedelta(days=7)
    restart_minutes: float = RESTART_MINUTES
    break_required_after: float = BREAK_REQUIRED_AFTER
    break_minutes: float = BREAK_MINUTES
    clip_to_window: bool = True
    truncate_at_now: bool = False


DEFAULT_HOS_CONFIG = HOSConfig()


@dataclass(frozen=True)
class HOSViolation:
    id: str
    type: str           # 11_hour | 14_hour | 70_hour | 30_minute_break
    description: str
    severity: str
    timestamp: datetime
    status: str = "open"
    resolved: bool = False


@dataclass(frozen=True)
class DriverHOSStatus:
    driver_id: Any
    current_status: str
    available_drive_time: float
    available_on_duty_time: float
    used_drive_time: float
    used_on_duty_time: float
    cycle_hours: float
    used_cycle_hours: float
    available_cycle_time: float
    restart_available: bool
    drive_time_since_break: float
    break_required_in: float
    last_logged_at: datetime | None
    compliance_status: str  # compliant | violation | pending
    evaluated_at: datetime
    violations: tuple[HOSViolation, ...] = field(default_factory=tuple)

    @property
    def is_compliant(self) -> bool:
        return self.compliance_status != "violation"


@dataclass(frozen=True)
class _Entry:
    start: datetime
    end: datetime
    status: DutyStatus


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps (e.g. read back from SQLite) are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _minutes(start: datetime, end: datetime) -> float:
    return max(0.0, (end - start).total_seconds() / 60)


def start_of_day(now: datetime, tz: tzinfo | None = None) -> datetime:
    """Midnight of ``now``'s calendar date in ``tz`` (default: ``now``'s own zone, UTC if naive)."""
    if tz is None:
        tz = now.tzinfo or timezone.utc
    local = _as_utc(now).astimezone(tz)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def _window_minutes(entry: _Entry, window_start: datetime, clip: bool) -> float:
    if clip:
        return _minutes(max(entry.start, window_start), entry.end)
    return _minutes(entry.start, entry.end) if entry.start >= window_start else 0.0


def _flatten(hos_logs: Iterable[Any], now: datetime, config: HOSConfig) -> list[_Entry]:
    entries = []
    for log in hos_logs:
        for e in getattr(log, "entries", None) or ():
            start, end = _as_utc(e.start_time), _as_utc(e.end_time)
            if config.truncate_at_now:
                if start >= now:
                    continue
                end = min(end, now)
            entries.append(_Entry(start, end, DutyStatus(e.status)))
    entries.sort(key=lambda e: e.start)
    return entries


def _drive_since_break(
    entries: list[_Entry], day_start: datetime, now: datetime, config: HOSConfig
) -> tuple[float, bool]:
    """
    Driving minutes since the last qualifying interruption, and whether the
    limit was exceeded by driving that ended today. Any non-driving entry or
    unlogged gap of at least ``break_minutes`` is an interruption.
    """
    since_break = 0.0
    breached = False
    prev_end: datetime | None = None

    for entry in entries:
        if prev_end is not None and _minutes(prev_end, entry.start) >= config.break_minutes:
            since_break = 0.0
        if entry.status is DutyStatus.DRIVING:
            since_break += _minutes(entry.start, entry.end)
            if since_break > config.break_required_after and entry.end > day_start:
                breached = True
        elif _minutes(entry.start, entry.end) >= config.break_minutes:
            since_break = 0.0
        prev_end = entry.end if prev_end is None else max(prev_end, entry.end)

    if prev_end is not None and _minutes(prev_end, now) >= config.break_minutes:
        since_break = 0.0
    return since_break, breached


def _violation(code: str, type_: str, description: str, now: datetime) -> HOSViolation:
    return HOSViolation(id=code, type=type_, description=description, severity="major", timestamp=now)


def calculate_hos_status(
    driver_id: Any,
    hos_logs: Iterable[Any],
    now: datetime,
    *,
    tz: tzinfo | None = None,
    config: HOSConfig = DEFAULT_HOS_CONFIG,
) -> DriverHOSStatus:
    """
    Point-in-time HOS snapshot for one driver.

    ``hos_logs`` is any iterable of objects with an ``entries`` attribute whose
    items expose ``status``, ``start_time`` and ``end_time`` (ORM rows, schemas
    or plain namespaces). ``tz`` is the reference frame for "today", normally
    the organization's time zone.
    """
    if tz is None:
        tz = now.tzinfo or timezone.utc
    now = _as_utc(now) if now.tzinfo is None else now
    entries = _flatten(hos_logs, now, config)

    if not entries:
        return DriverHOSStatus(
            driver_id=driver_id,
            current_status=DutyStatus.OFF_DUTY.value,
            available_drive_time=config.drive_limit,
            available_on_duty_time=config.on_duty_limit,
            used_drive_time=0.0,
            used_on_duty_time=0.0,
            cycle_hours=config.cycle_limit,
            used_cycle_hours=0.0,
            available_cycle_time=config.cycle_limit,
            restart_available=False,
            drive_time_since_break=0.0,
            break_required_in=config.break_required_after,
            last_logged_at=None,
            compliance_status="pending",
            evaluated_at=now,
        )

    day_start = start_of_day(now, tz)
    cycle_start = now - config.cycle_window
    clip = config.clip_to_window

    used_drive = 0.0
    used_on_duty = 0.0
    cycle_used = 0.0
    last_on_duty_end: datetime | None = None

    for entry in entries:
        if entry.status in ON_DUTY_STATUSES:
            today = _window_minutes(entry, day_start, clip)
            if entry.status is DutyStatus.DRIVING:
                used_drive += today
            used_on_duty += today
            cycle_used += _window_minutes(entry, cycle_start, clip)
            if last_on_duty_end is None or entry.end > last_on_duty_end:
                last_on_duty_end = entry.end

    restart_available = (
        last_on_duty_end is None or _minutes(last_on_duty_end, now) >= config.restart_minutes
    )
    since_break, break_breached = _drive_since_break(entries, day_start, now, config)

    violations = []
    if used_drive >= config.drive_limit:
        violations.append(_violation(
            "11", "11_hour", f"Exceeded {config.drive_limit / 60:g}-hour driving limit", now,
        ))
    if used_on_duty >= config.on_duty_limit:
        violations.append(_violation(
            "14", "14_hour", f"Exceeded {config.on_duty_limit / 60:g}-hour on-duty limit", now,
        ))
    if cycle_used >= config.cycle_limit:
        violations.append(_violation(
            "70", "70_hour",
            f"Exceeded {config.cycle_limit / 60:g}-hour {config.cycle_window.days + 1}-day limit", now,
        ))
    if break_breached:
        violations.append(_violation(
            "30", "30_minute_break",
            f"{config.break_minutes:g}-minute break required after "
            f"{config.break_required_after / 60:g} hours of driving", now,
        ))

    last = entries[-1]
    return DriverHOSStatus(
        driver_id=driver_id,
        current_status=last.status.value,
        available_drive_time=max(config.drive_limit - used_drive, 0.0),
        available_on_duty_time=max(config.on_duty_limit - used_on_duty, 0.0),
        used_drive_time=used_drive,
        used_on_duty_time=used_on_duty,
        cycle_hours=config.cycle_limit,
        used_cycle_hours=cycle_used,
        available_cycle_time=max(config.cycle_limit - cycle_used, 0.0),
        restart_available=restart_available,
        drive_time_since_break=since_break,
        break_required_in=max(config.break_required_after - since_break, 0.0),
        last_logged_at=last.end,
        compliance_status="violation" if violations else "compliant",
        evaluated_at=now,
        violations=tuple(violations),
    )
