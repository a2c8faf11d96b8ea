"""Enums and constants for QuickClock — matching the database ENUM types."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    employee = "employee"
    admin = "admin"


# ── Approval workflow (leave + manual attendance requests) ──────────

class RequestStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Decision(str, enum.Enum):
    """Outcome an admin may set on a pending item."""

    approved = "approved"
    rejected = "rejected"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveType(str, enum.Enum):
    sick = "sick"
    casual = "casual"
    paid = "paid"
    unpaid = "unpaid"
    other = "other"


# ── Manual attendance requests ──────────────────────────────────────

class ManualRequestType(str, enum.Enum):
    new = "new"
    edit = "edit"


# ── Notifications ───────────────────────────────────────────────────

class NotificationType(str, enum.Enum):
    system = "system"
    attendance = "attendance"
    leave = "leave"
    holiday = "holiday"


# ── Misc constants ──────────────────────────────────────────────────

EARTH_RADIUS_METERS = 6_371_000.0
AUTO_LEAVE_REASON = "Auto-deducted for absence"
WEEKEND_ISO_DAYS = frozenset({6, 7})   # Saturday, Sunday
