from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from school_attendance.alerts.model import Alert
from school_attendance.alerts.policy import AbsenceThresholdPolicy
from school_attendance.analytics.weights import AttendanceWeights
from school_attendance.attendance.model import AttendanceRecord
from school_attendance.container import EngineSettings, assemble
from school_attendance.core.enums import AlertSeverity, AttendanceStatus, HolidayType, Role
from school_attendance.departments.model import Department
from school_attendance.holidays.model import Holiday
from school_attendance.teachers.model import Teacher
from school_attendance.users.model import User

# Saturday 2024-01-20, 09:00 UTC
FIXED_NOW = datetime(2024, 1, 20, 9, 0, tzinfo=timezone.utc)
TODAY = FIXED_NOW.date()


class InMemoryUsers:
    def __init__(self, users: list[User] = ()):
        self._by_id = {u.user_id: u for u in users}

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda u: u.user_id)

    def count_all(self) -> int:
        return len(self._by_id)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)


class InMemoryTeachers:
    def __init__(self):
        self._by_id: dict[int, Teacher] = {}
        self._id = 0

    def add(self, code: str, name: str, department: Optional[str] = None, **extra) -> Teacher:
        teacher_id = self.create(
            teacher_code=code,
            full_name=name,
            department=department,
            email=extra.pop("email", None),
            phone=extra.pop("phone", None),
            join_date=extra.pop("join_date", None),
        )
        if extra:
            self.update(teacher_id, **extra)
        return self._by_id[teacher_id]

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda t: t.full_name)

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self._by_id.get(teacher_id)

    def get_by_code(self, teacher_code: str) -> Optional[Teacher]:
        return next((t for t in self._by_id.values() if t.teacher_code == teacher_code), None)

    def get_by_username(self, username: str) -> Optional[Teacher]:
        return next((t for t in self._by_id.values() if t.portal_username == username), None)

    def count_all(self) -> int:
        return len(self._by_id)

    def list_codes(self):
        return [t.teacher_code for t in self._by_id.values()]

    def create(self, *, teacher_code, full_name, department=None, email=None, phone=None, join_date=None) -> int:
        self._id += 1
        self._by_id[self._id] = Teacher(
            teacher_id=self._id,
            teacher_code=teacher_code,
            full_name=full_name,
            department=department,
            email=email,
            phone=phone,
            join_date=join_date,
        )
        return self._id

    def update(self, teacher_id: int, **fields) -> bool:
        if teacher_id not in self._by_id:
            return False
        self._by_id[teacher_id] = replace(self._by_id[teacher_id], **fields)
        return True

    def delete(self, teacher_id: int) -> bool:
        return self._by_id.pop(teacher_id, None) is not None


class InMemoryAttendance:
    """Keyed by (teacher_id, work_date) like the unique index in the real table."""

    def __init__(self):
        self._by_key: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0

    def add(self, teacher_id: int, day: date, status, absent_category=None) -> AttendanceRecord:
        return self.upsert(teacher_id=teacher_id, work_date=day, status=status, absent_category=absent_category)

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_key.values())

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return next((r for r in self._by_key.values() if r.record_id == record_id), None)

    def get_by_date(self, work_date: date):
        return sorted((r for r in self._by_key.values() if r.work_date == work_date), key=lambda r: r.teacher_id)

    def get_by_teacher(self, teacher_id: int, start_date=None, end_date=None):
        items = [
            r
            for r in self._by_key.values()
            if r.teacher_id == teacher_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        return sorted(items, key=lambda r: r.work_date, reverse=True)

    def get_in_range(self, start_date=None, end_date=None):
        items = [
            r
            for r in self._by_key.values()
            if (start_date is None or r.work_date >= start_date) and (end_date is None or r.work_date <= end_date)
        ]
        return sorted(items, key=lambda r: (r.work_date, r.teacher_id))

    def count_all(self) -> int:
        return len(self._by_key)

    def count_for_teacher(self, teacher_id: int) -> int:
        return sum(1 for r in self._by_key.values() if r.teacher_id == teacher_id)

    def upsert(
        self,
        *,
        teacher_id,
        work_date,
        status,
        absent_category=None,
        check_in_time=None,
        check_out_time=None,
        notes=None,
        recorded_by=None,
    ) -> AttendanceRecord:
        key = (teacher_id, work_date)
        existing = self._by_key.get(key)
        if existing is None:
            self._id += 1
            record_id = self._id
        else:
            record_id = existing.record_id
        record = AttendanceRecord(
            record_id=record_id,
            teacher_id=teacher_id,
            work_date=work_date,
            status=AttendanceStatus(status),
            absent_category=absent_category,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            notes=notes,
            recorded_by=recorded_by,
        )
        self._by_key[key] = record
        return record

    def update(self, *, record_id, status, absent_category=None, check_in_time=None, check_out_time=None, notes=None) -> bool:
        current = self.get_by_id(record_id)
        if current is None:
            return False
        self._by_key[(current.teacher_id, current.work_date)] = replace(
            current,
            status=status,
            absent_category=absent_category,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            notes=notes,
        )
        return True


class InMemoryDepartments:
    def __init__(self):
        self._by_id: dict[int, Department] = {}
        self._id = 0

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda d: d.name)

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        return self._by_id.get(dept_id)

    def count_all(self) -> int:
        return len(self._by_id)

    def get_by_name(self, name: str) -> Optional[Department]:
        return next((d for d in self._by_id.values() if d.name == name), None)

    def create(self, *, name, description=None) -> int:
        self._id += 1
        self._by_id[self._id] = Department(dept_id=self._id, name=name, description=description)
        return self._id

    def update(self, dept_id: int, *, name, description) -> bool:
        if dept_id not in self._by_id:
            return False
        self._by_id[dept_id] = replace(self._by_id[dept_id], name=name, description=description)
        return True

    def delete(self, dept_id: int) -> bool:
        return self._by_id.pop(dept_id, None) is not None


class InMemoryHolidays:
    def __init__(self):
        self._by_id: dict[int, Holiday] = {}
        self._id = 0

    def add(self, day: date, name: str = "Holiday") -> Holiday:
        holiday_id = self.create(holiday_date=day, name=name, holiday_type=HolidayType.PUBLIC)
        return self._by_id[holiday_id]

    def list_in_range(self, start_date=None, end_date=None):
        items = [
            h
            for h in self._by_id.values()
            if (start_date is None or h.holiday_date >= start_date) and (end_date is None or h.holiday_date <= end_date)
        ]
        return sorted(items, key=lambda h: h.holiday_date)

    def count_all(self) -> int:
        return len(self._by_id)

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        return self._by_id.get(holiday_id)

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        return next((h for h in self._by_id.values() if h.holiday_date == holiday_date), None)

    def create(self, *, holiday_date, name, holiday_type, description=None, created_by=None) -> int:
        self._id += 1
        self._by_id[self._id] = Holiday(
            holiday_id=self._id,
            holiday_date=holiday_date,
            name=name,
            holiday_type=holiday_type,
            description=description,
            created_by=created_by,
        )
        return self._id

    def update(self, holiday_id: int, *, holiday_date, name, holiday_type, description) -> bool:
        if holiday_id not in self._by_id:
            return False
        self._by_id[holiday_id] = replace(
            self._by_id[holiday_id],
            holiday_date=holiday_date,
            name=name,
            holiday_type=holiday_type,
            description=description,
        )
        return True

    def delete(self, holiday_id: int) -> bool:
        return self._by_id.pop(holiday_id, None) is not None


class InMemoryAlerts:
    def __init__(self):
        self._by_id: dict[int, Alert] = {}
        self._id = 0

    def all(self) -> list[Alert]:
        return sorted(self._by_id.values(), key=lambda a: a.alert_id)

    def list_all(self) -> list[Alert]:
        return self.all()

    def count_all(self) -> int:
        return len(self._by_id)

    def list_recent(self, *, limit: int, unread_only: bool = True):
        items = [a for a in self._by_id.values() if not (unread_only and a.is_read)]
        return sorted(items, key=lambda a: a.alert_id, reverse=True)[:limit]

    def get_by_id(self, alert_id: int) -> Optional[Alert]:
        return self._by_id.get(alert_id)

    def latest_unread_for_teacher(self, teacher_id: int, alert_type) -> Optional[Alert]:
        items = [
            a
            for a in self._by_id.values()
            if a.teacher_id == teacher_id and a.alert_type == alert_type and not a.is_read
        ]
        return max(items, key=lambda a: a.alert_id, default=None)

    def create(self, *, teacher_id, alert_type, message, severity: AlertSeverity) -> int:
        self._id += 1
        self._by_id[self._id] = Alert(
            alert_id=self._id,
            teacher_id=teacher_id,
            alert_type=alert_type,
            message=message,
            severity=severity,
            created_at=FIXED_NOW.replace(tzinfo=None),
        )
        return self._id

    def mark_read(self, alert_id: int) -> bool:
        if alert_id not in self._by_id:
            return False
        self._by_id[alert_id] = replace(self._by_id[alert_id], is_read=True)
        return True


@pytest.fixture()
def users():
    return InMemoryUsers(
        [
            User(1, "admin", generate_password_hash("admin123"), Role.ADMIN, "System Administrator"),
            User(2, "dataentry", generate_password_hash("data123"), Role.DATA_ENTRY, "Data Entry User"),
            User(3, "retired", generate_password_hash("old12345"), Role.ADMIN, "Retired Admin", is_active=False),
        ]
    )


@pytest.fixture()
def teachers():
    return InMemoryTeachers()


@pytest.fixture()
def attendance():
    return InMemoryAttendance()


@pytest.fixture()
def departments():
    return InMemoryDepartments()


@pytest.fixture()
def holidays():
    return InMemoryHolidays()


@pytest.fixture()
def alerts():
    return InMemoryAlerts()


@pytest.fixture()
def engine_settings():
    return EngineSettings(
        weights=AttendanceWeights(),
        timezone=timezone.utc,
        window_days=30,
        alert_policy=AbsenceThresholdPolicy([(3, "low"), (5, "medium"), (8, "high")], window_days=30),
    )


@pytest.fixture()
def container(users, teachers, attendance, departments, holidays, alerts, engine_settings):
    return assemble(
        users_repo=users,
        teachers_repo=teachers,
        departments_repo=departments,
        attendance_repo=attendance,
        holidays_repo=holidays,
        alerts_repo=alerts,
        engine_settings=engine_settings,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture()
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from school_attendance import create_app

    return create_app(container=container)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin_client(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return client


@pytest.fixture()
def dataentry_client(client):
    resp = client.post("/api/auth/login", json={"username": "dataentry", "password": "data123"})
    assert resp.status_code == 200
    return client
