from wards.models import Bed, Patient


def admission_data(**overrides):
    data = {
        "name": "Rajesh Kumar",
        "date_of_birth": "1985-06-15",
        "blood_group": "O+",
        "phone": "+91 9876543210",
        "issue": "Fever",
        "doctor": "Dr. Anil Mehta",
    }
    data.update(overrides)
    return data


def assert_occupancy_invariant(testcase):
    """Every bed is patient_admitted exactly when one patient points at it."""
    for bed in Bed.objects.all():
        occupants = Patient.objects.filter(bed=bed).count()
        testcase.assertLessEqual(occupants, 1)
        testcase.assertEqual(
            bed.status == Bed.PATIENT_ADMITTED,
            occupants == 1,
            f"bed {bed.bed_number} is {bed.status} with {occupants} occupants",
        )
