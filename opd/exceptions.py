from wards.exceptions import HospitalError


class InvalidTransition(HospitalError):
    status_code = 409
