"""Common module — shared utilities for QuickClock."""

from quickclock.common.clock import Clock, FixedClock, SystemClock, get_clock
from quickclock.common.constants import (
    AUTO_LEAVE_REASON,
    EARTH_RADIUS_METERS,
    Decision,
    LeaveType,
    ManualRequestType,
    NotificationType,
    RequestStatus,
    UserRole,
)
from quickclock.common.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    AppException,
    ConflictError,
    DuplicatePendingRequest,
    ForbiddenException,
    FutureDateNotAllowed,
    InvalidRange,
    NoCheckInFound,
    NotFoundException,
    NotPending,
    OverlapExists,
    ValidationException,
    register_exception_handlers,
)

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_clock",
    # Constants / Enums
    "Decision",
    "LeaveType",
    "ManualRequestType",
    "NotificationType",
    "RequestStatus",
    "UserRole",
    "AUTO_LEAVE_REASON",
    "EARTH_RADIUS_METERS",
    # Exceptions
    "AlreadyCheckedIn",
    "AlreadyCheckedOut",
    "AppException",
    "ConflictError",
    "DuplicatePendingRequest",
    "ForbiddenException",
    "FutureDateNotAllowed",
    "InvalidRange",
    "NoCheckInFound",
    "NotFoundException",
    "NotPending",
    "OverlapExists",
    "ValidationException",
    "register_exception_handlers",
]
