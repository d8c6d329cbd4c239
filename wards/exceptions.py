class HospitalError(Exception):
    """Base class for every error raised by the ward services."""

    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(HospitalError):
    """A required field is missing or a value is out of range.

    `details` maps field names to lists of messages, the same shape as
    `form.errors.get_json_data()` flattened to plain strings.
    """

    status_code = 400

    @classmethod
    def from_form(cls, form):
        details = {
            field: [err["message"] for err in errors]
            for field, errors in form.errors.get_json_data().items()
        }
        return cls("Invalid input", details)


class BedUnavailable(HospitalError):
    status_code = 409


class NotFound(HospitalError):
    status_code = 404


class PatientNotAdmitted(NotFound):
    """The patient exists but no longer occupies a bed."""


class PersistenceError(HospitalError):
    status_code = 503


class ImmutableRecord(HospitalError):
    status_code = 409


class ExportError(HospitalError):
    status_code = 500


class ExtractionUnavailable(HospitalError):
    status_code = 501
