"""Error taxonomy for rotation, assembly and slot edits. Rendered as {"error": message} by the API."""


class RotationError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RotationError):
    """Malformed input: slot counts, station/slot ranges, missing fields, unknown day."""

    status_code = 400


class BusinessRuleViolation(RotationError):
    """Well-formed request that breaks a structural rule (protected slot, wrong tri-set for the day)."""

    status_code = 400


class ExhaustedPoolError(RotationError):
    """No usable candidate: the user needs to add exercises or tri-sets, retrying will not help."""

    status_code = 400


class GenerationError(RotationError):
    """A fixed prerequisite of a day (e.g. Non-Stop Sparring) could not be resolved or created."""

    status_code = 400


class OwnershipError(RotationError):
    status_code = 403


class NotFoundError(RotationError):
    status_code = 404
