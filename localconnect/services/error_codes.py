from enum import Enum


class ErrorCode(str, Enum):
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    EVENT_NOT_APPROVED = "EVENT_NOT_APPROVED"
    EVENT_INVALID_TIMES = "EVENT_INVALID_TIMES"
    NOT_EVENT_ORGANIZER = "NOT_EVENT_ORGANIZER"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"
    ATTENDEE_NOT_FOUND = "ATTENDEE_NOT_FOUND"
    ATTENDEE_ALREADY_REGISTERED = "ATTENDEE_ALREADY_REGISTERED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_BANNED = "USER_BANNED"
    CANNOT_MODIFY_SELF = "CANNOT_MODIFY_SELF"
    NO_CHANGES = "NO_CHANGES"
