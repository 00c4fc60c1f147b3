# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Roster error taxonomy.
Raised by the service layer, translated to HTTP status codes by controllers.
"""


class RosterError(Exception):
    """Base class for every failure the roster services report to callers."""

    status_code: int = 400
    reason: str = "roster_error"


class NotFoundError(RosterError):
    """Referenced group, party or member does not exist for the account."""

    status_code = 404
    reason = "not_found"


class FullError(RosterError):
    """Group already holds its maximum parties, or a party has no free slot."""

    status_code = 409
    reason = "full"


class InvalidSlotCountError(RosterError):
    status_code = 400
    reason = "invalid_slot_count"


class InvalidSlotIndexError(RosterError):
    status_code = 400
    reason = "invalid_slot_index"


class DuplicateSlotMemberError(RosterError):
    status_code = 400
    reason = "duplicate_slot_member"


class ActivityTypeMismatchError(RosterError):
    status_code = 409
    reason = "activity_type_mismatch"


class PositionMismatchError(RosterError):
    """Declared swap positions no longer match the stored roster."""

    status_code = 409
    reason = "position_mismatch"


class DuplicateMemberError(RosterError):
    status_code = 409
    reason = "duplicate_member"


class InvalidProfileError(RosterError):
    """A member profile patch failed field validation."""

    status_code = 400
    reason = "invalid_profile"
