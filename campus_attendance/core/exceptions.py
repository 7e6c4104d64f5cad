class ScanError(Exception):
    """Base exception for a rejected scan.

    ``code`` is the only detail that reaches the caller; the message is for
    the log.
    """

    code = "attendance_recording_failed"
    status_code = 500


class BadRequest(ScanError):
    """Raised when card_uid, device_code or gateway_code is missing or empty."""

    code = "missing_fields"
    status_code = 400


class CardNotFound(ScanError):
    """Raised when no active card carries the scanned uid."""

    code = "card_not_found"
    status_code = 404


class EndpointNotRegistered(ScanError):
    """Raised when the gateway code or the device code is unknown."""

    code = "gateway_or_device_not_found"
    status_code = 404


class AlreadyRecorded(ScanError):
    """Raised when the student already has a record for the lecture."""

    code = "already_recorded"
    status_code = 409


class PersistenceFailure(ScanError):
    """Raised for any storage fault while handling a scan."""

    code = "attendance_recording_failed"
    status_code = 500


class LectureNotFound(Exception):
    pass


class LectureTransitionError(Exception):
    pass
