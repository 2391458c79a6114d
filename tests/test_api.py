from __future__ import annotations

from datetime import date

from school_attendance.core.enums import AbsentCategory, AttendanceStatus


def test_requires_login(client):
    resp = client.get("/api/stats/overview")
    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Authentication required"}


def test_login_rejects_bad_password(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert resp.status_code == 401


def test_login_and_logout(client):
    resp = client.post("/api/auth/login", json={"username": "dataentry", "password": "data123"})
    assert resp.get_json()["user"]["role"] == "dataentry"
    assert client.get("/api/auth/me").status_code == 200

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_data_entry_cannot_manage_teachers(dataentry_client):
    resp = dataentry_client.post("/api/teachers", json={"name": "Alice Tan"})
    assert resp.status_code == 403


def test_teacher_crud(admin_client):
    resp = admin_client.post("/api/teachers", json={"name": "Alice Tan", "department": "Science"})
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["teacherId"] == "T001"

    resp = admin_client.put(f"/api/teachers/{created['id']}", json={"email": "alice@school.test"})
    assert resp.get_json()["email"] == "alice@school.test"
    assert resp.get_json()["department"] == "Science"

    assert admin_client.get("/api/teachers").get_json()[0]["name"] == "Alice Tan"
    assert admin_client.delete(f"/api/teachers/{created['id']}").status_code == 204
    assert admin_client.get(f"/api/teachers/{created['id']}").status_code == 404


def test_mark_attendance_round_trip(dataentry_client, teachers, attendance):
    t1 = teachers.add("T001", "Alice Tan", "Science")
    body = {"teacherId": t1.teacher_id, "date": "2024-01-10", "status": "present", "checkInTime": "07:45"}

    assert dataentry_client.post("/api/attendance", json=body).status_code == 201
    body.update(status="absent", absentCategory="official_leave")
    resp = dataentry_client.post("/api/attendance", json=body)

    assert resp.status_code == 201
    assert resp.get_json()["status"] == "absent"
    assert resp.get_json()["absentCategory"] == "official_leave"
    assert resp.get_json()["recordedBy"] == 2
    assert len(attendance.all()) == 1

    rows = dataentry_client.get("/api/attendance/date/2024-01-10").get_json()
    assert rows[0]["teacher"]["teacherId"] == "T001"


def test_mark_attendance_validation_errors(dataentry_client, teachers):
    t1 = teachers.add("T001", "Alice Tan")

    resp = dataentry_client.post("/api/attendance", json={"teacherId": t1.teacher_id, "date": "2024-01-10", "status": "absent"})
    assert resp.status_code == 400
    assert "absentCategory" in resp.get_json()["message"]

    resp = dataentry_client.post("/api/attendance", json={"teacherId": 99, "date": "2024-01-10", "status": "present"})
    assert resp.status_code == 404


def test_bulk_mark(dataentry_client, teachers, attendance):
    a = teachers.add("T001", "Alice Tan")
    b = teachers.add("T002", "Ben Lee")

    resp = dataentry_client.post(
        "/api/attendance/bulk",
        json={
            "date": "2024-01-10",
            "records": [
                {"teacherId": a.teacher_id, "status": "present"},
                {"teacherId": b.teacher_id, "status": "short_leave", "notes": "Clinic"},
            ],
        },
    )

    assert resp.status_code == 201
    assert resp.get_json()["count"] == 2
    assert dataentry_client.post("/api/attendance/bulk", json={"date": "2024-01-10"}).status_code == 400


def test_update_attendance_record(dataentry_client, teachers, attendance):
    t1 = teachers.add("T001", "Alice Tan")
    record = attendance.add(t1.teacher_id, date(2024, 1, 10), AttendanceStatus.PRESENT)

    resp = dataentry_client.put(f"/api/attendance/{record.record_id}", json={"status": "half_day"})

    assert resp.status_code == 200
    assert resp.get_json()["status"] == "half_day"
    assert dataentry_client.put("/api/attendance/999", json={"status": "present"}).status_code == 404


def test_trends_skip_holidays(admin_client, teachers, attendance):
    t1 = teachers.add("T001", "Alice Tan")
    attendance.add(t1.teacher_id, date(2024, 1, 15), AttendanceStatus.PRESENT)
    attendance.add(t1.teacher_id, date(2024, 1, 16), AttendanceStatus.PRESENT)

    resp = admin_client.post("/api/holidays", json={"date": "2024-01-15", "name": "Public Holiday", "type": "public"})
    assert resp.status_code == 201

    trend = admin_client.get("/api/stats/trends?startDate=2024-01-01&endDate=2024-01-31").get_json()
    assert [t["date"] for t in trend] == ["2024-01-16"]

    check = admin_client.get("/api/holidays/2024-01-15/check").get_json()
    assert check["isHoliday"] is True


def test_bad_query_parameters_are_400(admin_client):
    assert admin_client.get("/api/stats/trends?days=abc").status_code == 400
    assert admin_client.get("/api/stats/top-performers?limit=-1").status_code == 400
    assert admin_client.get("/api/analytics/absent?startDate=01-01-2024").status_code == 400


def test_stats_endpoints(admin_client, teachers, attendance):
    t1 = teachers.add("T001", "Alice Tan", "Science")
    teachers.add("T002", "Ben Lee")
    attendance.add(t1.teacher_id, date(2024, 1, 19), AttendanceStatus.PRESENT)
    attendance.add(t1.teacher_id, date(2024, 1, 18), AttendanceStatus.ABSENT, AbsentCategory.SICK_LEAVE)

    overview = admin_client.get("/api/stats/overview?date=2024-01-19").get_json()
    assert overview["attendanceRate"] == 50.0

    top = admin_client.get("/api/stats/top-performers?limit=5").get_json()
    assert [t["teacher"]["name"] for t in top] == ["Alice Tan"]

    departments = admin_client.get("/api/stats/departments").get_json()
    assert {d["department"] for d in departments} == {"Science", "Unknown"}

    absent = admin_client.get("/api/analytics/absent").get_json()
    assert absent["sickLeave"] == 1

    totals = admin_client.get(f"/api/analytics/teacher/{t1.teacher_id}/absent-totals").get_json()
    assert totals["totalAbsent"] == 1

    pattern = admin_client.get(f"/api/stats/teacher/{t1.teacher_id}/pattern?weeks=1").get_json()
    assert pattern["weeks"][0]["rate"] == 50.0


def test_export_formats(admin_client, teachers, attendance):
    t1 = teachers.add("T001", "Alice Tan", "Science")
    attendance.add(t1.teacher_id, date(2024, 1, 10), AttendanceStatus.PRESENT)

    csv_resp = admin_client.get("/api/export/attendance?format=csv")
    assert csv_resp.mimetype == "text/csv"
    assert "attachment" in csv_resp.headers["Content-Disposition"]
    assert b"Teacher ID,Teacher Name" in csv_resp.data

    rows = admin_client.get("/api/export/attendance?format=json").get_json()
    assert rows[0]["attendanceRate"] == 100.0

    html = admin_client.get("/api/export/attendance?format=html&endDate=2024-01-10")
    assert html.mimetype == "text/html"
    assert b"Daily Attendance Report - 2024-01-10" in html.data
    assert b"Alice Tan" in html.data

    teacher_html = admin_client.get(f"/api/reports/teacher/{t1.teacher_id}?format=html")
    assert b"Teacher: Alice Tan" in teacher_html.data

    assert admin_client.get("/api/export/attendance?format=xml").status_code == 400


def test_alerts_endpoints(dataentry_client, teachers):
    t1 = teachers.add("T001", "Alice Tan")
    for day in ("2024-01-08", "2024-01-09", "2024-01-10"):
        dataentry_client.post(
            "/api/attendance",
            json={"teacherId": t1.teacher_id, "date": day, "status": "absent", "absentCategory": "sick_leave"},
        )

    listed = dataentry_client.get("/api/alerts").get_json()
    assert len(listed) == 1 and listed[0]["severity"] == "low"

    assert dataentry_client.post(f"/api/alerts/{listed[0]['id']}/read").status_code == 200
    assert dataentry_client.get("/api/alerts").get_json() == []
    assert dataentry_client.post("/api/alerts/999/read").status_code == 404


def test_teacher_portal(admin_client, client, teachers, attendance):
    t1 = teachers.add("T001", "Alice Tan")
    attendance.add(t1.teacher_id, date(2024, 1, 19), AttendanceStatus.PRESENT)
    attendance.add(t1.teacher_id, date(2024, 1, 18), AttendanceStatus.HALF_DAY)

    resp = admin_client.put(
        f"/api/teachers/{t1.teacher_id}/credentials",
        json={"username": "alice", "password": "secret1", "isPortalEnabled": True},
    )
    assert resp.get_json()["isPortalEnabled"] is True

    # portal login replaces the admin session on this client
    assert client.post("/api/teacher-portal/login", json={"username": "alice", "password": "secret1"}).status_code == 200
    data = client.get("/api/teacher-portal/attendance").get_json()

    assert data["teacher"]["teacherId"] == "T001"
    assert data["attendanceRate"] == 75.0
    assert len(data["records"]) == 2
    assert client.get("/api/stats/overview").status_code == 401


def test_portal_requires_portal_session(client):
    assert client.get("/api/teacher-portal/attendance").status_code == 401
    resp = client.post("/api/teacher-portal/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_unexpected_errors_are_generic_500(admin_client, container, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("connection refused on db-host:3306")

    monkeypatch.setattr(container.stats_service, "get_overview_stats", boom)
    resp = admin_client.get("/api/stats/overview")

    assert resp.status_code == 500
    assert resp.get_json() == {"message": "Internal server error"}


def test_unknown_route_is_json_404(admin_client):
    resp = admin_client.get("/api/nope")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


def test_credentials_reject_string_portal_flag(admin_client, teachers):
    t1 = teachers.add("T001", "Alice Tan")
    url = f"/api/teachers/{t1.teacher_id}/credentials"

    assert admin_client.put(url, json={"username": "alice", "password": "secret1", "isPortalEnabled": True}).status_code == 200
    resp = admin_client.put(url, json={"username": "alice", "isPortalEnabled": "false"})

    assert resp.status_code == 400
    assert "isPortalEnabled" in resp.get_json()["message"]
    assert teachers.get_by_id(t1.teacher_id).portal_enabled is True


def test_oversized_windows_are_400_not_500(admin_client, teachers):
    t1 = teachers.add("T001", "Alice Tan")

    assert admin_client.get("/api/stats/trends?days=1000000").status_code == 400
    assert admin_client.get(f"/api/stats/teacher/{t1.teacher_id}/pattern?weeks=200000").status_code == 400
    assert admin_client.get("/api/stats/top-performers?limit=100000000").status_code == 400
    assert admin_client.get("/api/stats/trends?days=3660").status_code == 200
