"""Manual attendance request workflow tests — submission rules, one pending
request per day, terminal decisions and the effect of approval on attendance.
"""

from __future__ import annotations

import uuid
from datetime import date, time
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from quickclock.attendance.models import AttendanceRecord
from quickclock.attendance.service import AttendanceService
from quickclock.common.constants import Decision, ManualRequestType, RequestStatus
from quickclock.common.exceptions import (
    DuplicatePendingRequest,
    ForbiddenException,
    FutureDateNotAllowed,
    NotFoundException,
    NotPending,
    ValidationException,
)
from quickclock.manual_requests.models import ManualAttendanceRequest
from quickclock.manual_requests.service import ManualRequestService
from quickclock.notifications.outbox import NotificationOutbox
from tests.conftest import TestSessionFactory

DAY = date(2026, 3, 16)


async def _submit(db, user, clock, outbox, *, day=DAY, ci=time(9, 0), co=time(18, 0),
                  reason="Forgot to check in"):
    request = await ManualRequestService.submit(
        db, user, day, ci, co, reason, clock=clock, outbox=outbox,
    )
    await db.commit()
    return request


# ═════════════════════════════════════════════════════════════════════
# 1. Submit
# ═════════════════════════════════════════════════════════════════════


class TestSubmit:

    async def test_new_request_for_day_without_record(self, db, employee, clock, outbox):
        request = await _submit(db, employee, clock, outbox)

        assert request.status == RequestStatus.pending
        assert request.type == ManualRequestType.new
        assert request.original_record_id is None
        assert [e.title for e in outbox.pending] == [
            "Manual Attendance Request Submitted",
            "New Manual Attendance Request",
        ]

    async def test_edit_request_references_existing_record(
        self, db, employee, clock, outbox,
    ):
        record, _ = await AttendanceService.apply_times(db, employee.id, DAY, time(9, 0), None)
        await db.commit()

        request = await _submit(db, employee, clock, outbox, ci=None, co=time(18, 15))
        assert request.type == ManualRequestType.edit
        assert request.original_record_id == record.id

    async def test_today_is_allowed(self, db, employee, clock, outbox):
        request = await _submit(db, employee, clock, outbox, day=clock.today())
        assert request.date == clock.today()

    async def test_future_date_rejected(self, db, employee, clock, outbox):
        with pytest.raises(FutureDateNotAllowed):
            await _submit(db, employee, clock, outbox, day=date(2026, 3, 19))

    async def test_reason_required(self, db, employee, clock, outbox):
        with pytest.raises(ValidationException) as exc_info:
            await _submit(db, employee, clock, outbox, reason="   ")
        assert "reason" in exc_info.value.errors

    async def test_some_time_required(self, db, employee, clock, outbox):
        with pytest.raises(ValidationException):
            await _submit(db, employee, clock, outbox, ci=None, co=None)

    async def test_second_pending_request_same_day_rejected(
        self, db, employee, clock, outbox,
    ):
        await _submit(db, employee, clock, outbox)
        with pytest.raises(DuplicatePendingRequest):
            await _submit(db, employee, clock, outbox)

    async def test_other_days_and_employees_are_independent(
        self, db, employee, other_employee, clock, outbox,
    ):
        await _submit(db, employee, clock, outbox)
        await _submit(db, employee, clock, outbox, day=date(2026, 3, 17))
        await _submit(db, other_employee, clock, outbox)

        rows = await ManualRequestService.list_all(db, pending_only=True)
        assert len(rows) == 3

    async def test_resubmit_allowed_after_decision(
        self, db, employee, admin, clock, outbox,
    ):
        first = await _submit(db, employee, clock, outbox)
        await ManualRequestService.process(
            db, first.id, Decision.rejected, admin, clock=clock, outbox=outbox,
        )
        await db.commit()

        second = await _submit(db, employee, clock, outbox)
        assert second.id != first.id

    async def test_pending_index_catches_racing_submission(
        self, db, employee, clock, outbox,
    ):
        await _submit(db, employee, clock, outbox)

        async with TestSessionFactory() as session:
            with patch.object(
                ManualRequestService, "_pending_for", new=AsyncMock(return_value=None),
            ):
                with pytest.raises(DuplicatePendingRequest):
                    await ManualRequestService.submit(
                        session, employee, DAY, time(9, 0), None, "again",
                        clock=clock, outbox=NotificationOutbox(),
                    )

        count = (
            await db.execute(select(func.count()).select_from(ManualAttendanceRequest))
        ).scalar_one()
        assert count == 1


# ═════════════════════════════════════════════════════════════════════
# 2. Process
# ═════════════════════════════════════════════════════════════════════


class TestProcess:

    async def test_approve_new_creates_record(self, db, employee, admin, clock, outbox):
        request = await _submit(db, employee, clock, outbox)
        processed = await ManualRequestService.process(
            db, request.id, Decision.approved, admin, clock=clock, outbox=outbox,
        )
        await db.commit()

        assert processed.status == RequestStatus.approved
        assert processed.reviewed_by == admin.id
        assert processed.reviewed_at == clock.now()

        record = await AttendanceService.get_record(db, employee.id, DAY)
        assert record.check_in_time == time(9, 0)
        assert record.check_out_time == time(18, 0)
        assert record.manually_added is True
        assert outbox.pending[-1].title == "Manual Attendance Request Approved"
        assert outbox.pending[-1].user_id == employee.id

    async def test_approve_edit_patches_supplied_times(
        self, db, employee, admin, clock, outbox,
    ):
        await AttendanceService.apply_times(db, employee.id, DAY, time(9, 10), None)
        await db.commit()

        request = await _submit(db, employee, clock, outbox, ci=None, co=time(18, 5))
        await ManualRequestService.process(
            db, request.id, Decision.approved, admin, clock=clock, outbox=outbox,
        )
        await db.commit()

        record = await AttendanceService.get_record(db, employee.id, DAY)
        assert record.check_in_time == time(9, 10)
        assert record.check_out_time == time(18, 5)
        assert record.manually_added is True

    async def test_reject_leaves_attendance_untouched(
        self, db, employee, admin, clock, outbox,
    ):
        request = await _submit(db, employee, clock, outbox)
        processed = await ManualRequestService.process(
            db, request.id, Decision.rejected, admin, clock=clock, outbox=outbox,
        )
        await db.commit()

        assert processed.status == RequestStatus.rejected
        assert await AttendanceService.get_record(db, employee.id, DAY) is None
        assert outbox.pending[-1].title == "Manual Attendance Request Rejected"

    async def test_decision_is_final(self, db, employee, admin, clock, outbox):
        request = await _submit(db, employee, clock, outbox)
        await ManualRequestService.process(
            db, request.id, Decision.rejected, admin, clock=clock, outbox=outbox,
        )
        await db.commit()

        with pytest.raises(NotPending):
            await ManualRequestService.process(
                db, request.id, Decision.approved, admin, clock=clock, outbox=outbox,
            )
        count = (
            await db.execute(select(func.count()).select_from(AttendanceRecord))
        ).scalar_one()
        assert count == 0

    async def test_unknown_request(self, db, admin, clock, outbox):
        with pytest.raises(NotFoundException):
            await ManualRequestService.process(
                db, uuid.uuid4(), Decision.approved, admin, clock=clock, outbox=outbox,
            )


# ═════════════════════════════════════════════════════════════════════
# 3. Cancel
# ═════════════════════════════════════════════════════════════════════


class TestCancel:

    async def test_owner_cancels_pending(self, db, employee, clock, outbox):
        request = await _submit(db, employee, clock, outbox)
        await ManualRequestService.cancel(db, request.id, employee, outbox=outbox)
        await db.commit()

        assert await ManualRequestService.list_mine(db, employee.id) == []
        assert outbox.pending[-1].title == "Manual Attendance Request Cancelled"
        assert outbox.pending[-1].to_admins is True

    async def test_cannot_cancel_others_request(
        self, db, employee, other_employee, clock, outbox,
    ):
        request = await _submit(db, employee, clock, outbox)
        with pytest.raises(ForbiddenException):
            await ManualRequestService.cancel(db, request.id, other_employee, outbox=outbox)

    async def test_cannot_cancel_decided_request(
        self, db, employee, admin, clock, outbox,
    ):
        request = await _submit(db, employee, clock, outbox)
        await ManualRequestService.process(
            db, request.id, Decision.approved, admin, clock=clock, outbox=outbox,
        )
        await db.commit()

        with pytest.raises(NotPending):
            await ManualRequestService.cancel(db, request.id, employee, outbox=outbox)


# ═════════════════════════════════════════════════════════════════════
# 4. API
# ═════════════════════════════════════════════════════════════════════


class TestManualRequestAPI:

    async def test_submit_and_approve(self, client, auth_headers, admin_headers):
        resp = await client.post(
            "/api/v1/manual-requests",
            json={"date": "2026-03-16", "check_in_time": "09:00:00", "reason": "Badge failed"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        request_id = resp.json()["id"]
        assert resp.json()["status"] == "pending"

        resp = await client.get("/api/v1/manual-requests/pending", headers=admin_headers)
        assert [r["id"] for r in resp.json()] == [request_id]
        assert resp.json()[0]["employee"]["email"] == "test.user@quickclock.io"

        resp = await client.put(
            f"/api/v1/manual-requests/{request_id}/process",
            json={"status": "approved"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "approved"

        resp = await client.put(
            f"/api/v1/manual-requests/{request_id}/process",
            json={"status": "rejected"},
            headers=admin_headers,
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == "not_pending"

        resp = await client.get("/api/v1/attendance/history", headers=auth_headers)
        assert resp.json()[0]["check_in_time"] == "09:00:00"
        assert resp.json()[0]["manually_added"] is True

    async def test_duplicate_pending_conflict(self, client, auth_headers):
        payload = {"date": "2026-03-16", "check_out_time": "18:00:00", "reason": "Left early"}
        await client.post("/api/v1/manual-requests", json=payload, headers=auth_headers)
        resp = await client.post("/api/v1/manual-requests", json=payload, headers=auth_headers)
        assert resp.status_code == 409
        assert resp.json()["code"] == "duplicate_pending_request"

    async def test_future_date_is_validation_error(self, client, auth_headers):
        resp = await client.post(
            "/api/v1/manual-requests",
            json={"date": "2026-04-01", "check_in_time": "09:00:00", "reason": "Plan"},
            headers=auth_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == "future_date_not_allowed"

    async def test_pending_state_is_not_a_decision(self, client, admin_headers):
        resp = await client.put(
            f"/api/v1/manual-requests/{uuid.uuid4()}/process",
            json={"status": "pending"},
            headers=admin_headers,
        )
        assert resp.status_code == 422

    async def test_employee_cannot_process(self, client, auth_headers):
        resp = await client.put(
            f"/api/v1/manual-requests/{uuid.uuid4()}/process",
            json={"status": "approved"},
            headers=auth_headers,
        )
        assert resp.status_code == 403

    async def test_cancel_own(self, client, auth_headers):
        resp = await client.post(
            "/api/v1/manual-requests",
            json={"date": "2026-03-16", "check_in_time": "09:00:00", "reason": "Badge"},
            headers=auth_headers,
        )
        request_id = resp.json()["id"]

        resp = await client.delete(
            f"/api/v1/manual-requests/{request_id}", headers=auth_headers,
        )
        assert resp.status_code == 204

        resp = await client.get("/api/v1/manual-requests/mine", headers=auth_headers)
        assert resp.json() == []
