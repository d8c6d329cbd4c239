from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from wards.exceptions import (
    BedUnavailable,
    NotFound,
    PatientNotAdmitted,
    PersistenceError,
    ValidationError,
)
from wards.models import AuditLog, Bed, DischargeSummary, Patient
from wards.services import billing, occupancy
from wards.tests.helpers import admission_data, assert_occupancy_invariant


class AdmissionTest(TestCase):
    def setUp(self):
        self.bed1, self.bed2, self.bed3 = occupancy.create_beds(3)

    def test_admit_links_patient_and_marks_bed(self):
        patient = occupancy.admit(self.bed1.pk, admission_data())

        self.bed1.refresh_from_db()
        self.assertEqual(self.bed1.status, Bed.PATIENT_ADMITTED)
        self.assertEqual(patient.bed_id, self.bed1.pk)
        self.assertIsNotNone(patient.admission_date)
        assert_occupancy_invariant(self)

    def test_admit_fills_defaults(self):
        patient = occupancy.admit(self.bed1.pk, admission_data())

        self.assertEqual(patient.recovery_rate, 0)
        stay = patient.expected_discharge_date - patient.admission_date
        self.assertEqual(stay, timedelta(days=7))

    def test_admit_writes_audit_entry(self):
        patient = occupancy.admit(self.bed1.pk, admission_data())
        self.assertTrue(
            AuditLog.objects.filter(model_name="Patient", object_id=patient.pk, action="create").exists()
        )

    def test_admit_rejects_occupied_bed(self):
        occupancy.admit(self.bed1.pk, admission_data(name="First"))

        with self.assertRaises(BedUnavailable):
            occupancy.admit(self.bed1.pk, admission_data(name="Second"))

        self.assertEqual(Patient.objects.count(), 1)
        self.assertEqual(Patient.objects.get().name, "First")
        assert_occupancy_invariant(self)

    def test_admit_rejects_bed_under_maintenance(self):
        Bed.objects.filter(pk=self.bed2.pk).update(status=Bed.UNDER_MAINTENANCE)

        with self.assertRaises(BedUnavailable):
            occupancy.admit(self.bed2.pk, admission_data())

        self.bed2.refresh_from_db()
        self.assertEqual(self.bed2.status, Bed.UNDER_MAINTENANCE)
        self.assertFalse(Patient.objects.exists())

    def test_unavailable_bed_wins_over_incomplete_data(self):
        occupancy.admit(self.bed1.pk, admission_data())
        Bed.objects.filter(pk=self.bed2.pk).update(status=Bed.UNDER_MAINTENANCE)

        for bed in (self.bed1, self.bed2):
            with self.assertRaises(BedUnavailable):
                occupancy.admit(bed.pk, {"name": "x"})
        self.assertEqual(Patient.objects.count(), 1)

    def test_admit_requires_mandatory_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            occupancy.admit(self.bed1.pk, {"address": "123 MG Road"})

        for field in ("name", "date_of_birth", "blood_group", "phone", "issue", "doctor"):
            self.assertIn(field, ctx.exception.details)
        self.bed1.refresh_from_db()
        self.assertEqual(self.bed1.status, Bed.VACANT)

    def test_admit_rejects_unknown_blood_group(self):
        with self.assertRaises(ValidationError) as ctx:
            occupancy.admit(self.bed1.pk, admission_data(blood_group="Z"))
        self.assertIn("blood_group", ctx.exception.details)

    def test_admit_unknown_bed(self):
        with self.assertRaises(NotFound):
            occupancy.admit(9999, admission_data())


class DischargeTest(TestCase):
    def setUp(self):
        self.bed = occupancy.create_beds(1)[0]
        self.patient = occupancy.admit(self.bed.pk, admission_data())

    def test_discharge_bills_and_frees_bed(self):
        billing.add_expense(self.patient.pk, "X-Ray", "150", timezone.localdate())
        billing.add_expense(self.patient.pk, "Room Charges", "200.50", timezone.localdate())
        expected = billing.total_for(self.patient.pk)

        summary = occupancy.discharge(self.patient.pk, "Recovered well")

        self.patient.refresh_from_db()
        self.bed.refresh_from_db()
        self.assertIsNone(self.patient.bed_id)
        self.assertEqual(self.bed.status, Bed.VACANT)
        self.assertEqual(DischargeSummary.objects.filter(patient=self.patient).count(), 1)
        self.assertEqual(summary.total_bill, expected)
        self.assertEqual(summary.bed_number, self.bed.bed_number)
        self.assertEqual(summary.discharge_date, timezone.localdate())
        assert_occupancy_invariant(self)

    def test_discharge_twice_is_rejected(self):
        occupancy.discharge(self.patient.pk, "Recovered")

        with self.assertRaises(PatientNotAdmitted) as ctx:
            occupancy.discharge(self.patient.pk, "Recovered again")

        self.assertIsInstance(ctx.exception, NotFound)
        self.assertEqual(DischargeSummary.objects.filter(patient=self.patient).count(), 1)

    def test_second_discharge_without_text_is_not_admitted(self):
        occupancy.discharge(self.patient.pk, "Recovered")

        with self.assertRaises(PatientNotAdmitted):
            occupancy.discharge(self.patient.pk, "")

    def test_discharge_requires_summary_text(self):
        with self.assertRaises(ValidationError):
            occupancy.discharge(self.patient.pk, "   ")
        self.assertFalse(DischargeSummary.objects.exists())

    def test_discharge_unknown_patient(self):
        with self.assertRaises(NotFound):
            occupancy.discharge(12345, "Recovered")

    def test_failed_discharge_leaves_patient_admitted(self):
        with mock.patch.object(Patient, "save", side_effect=DatabaseError("connection lost")):
            with self.assertRaises(PersistenceError):
                occupancy.discharge(self.patient.pk, "Recovered")

        self.patient.refresh_from_db()
        self.bed.refresh_from_db()
        self.assertEqual(self.patient.bed_id, self.bed.pk)
        self.assertEqual(self.bed.status, Bed.PATIENT_ADMITTED)
        self.assertFalse(DischargeSummary.objects.exists())

        # A retry goes through and writes exactly one summary
        occupancy.discharge(self.patient.pk, "Recovered")
        self.assertEqual(DischargeSummary.objects.count(), 1)

    def test_interrupted_discharge_reuses_existing_summary(self):
        leftover = DischargeSummary.objects.create(
            patient=self.patient,
            summary_text="Recovered",
            total_bill="0.00",
            discharge_date=timezone.localdate(),
            bed_number=self.bed.bed_number,
        )

        summary = occupancy.discharge(self.patient.pk, "Recovered")

        self.assertEqual(summary.pk, leftover.pk)
        self.assertEqual(DischargeSummary.objects.count(), 1)
        self.bed.refresh_from_db()
        self.assertEqual(self.bed.status, Bed.VACANT)

    def test_bed_can_be_reused_after_discharge(self):
        occupancy.discharge(self.patient.pk, "Recovered")
        second = occupancy.admit(self.bed.pk, admission_data(name="Next Patient"))

        self.assertEqual(second.bed_id, self.bed.pk)
        assert_occupancy_invariant(self)


class BoardTest(TestCase):
    def test_beds_listed_by_number_with_occupants(self):
        for number in (5, 2, 9):
            Bed.objects.create(bed_number=number)
        middle = Bed.objects.get(bed_number=5)
        patient = occupancy.admit(middle.pk, admission_data())

        board = occupancy.list_beds_with_occupants()

        self.assertEqual([bed.bed_number for bed, _ in board], [2, 5, 9])
        self.assertEqual([p.pk if p else None for _, p in board], [None, patient.pk, None])

    def test_vacant_beds_excludes_other_statuses(self):
        beds = occupancy.create_beds(3)
        occupancy.admit(beds[0].pk, admission_data())
        Bed.objects.filter(pk=beds[1].pk).update(status=Bed.UNDER_MAINTENANCE)

        self.assertEqual([bed.pk for bed in occupancy.vacant_beds()], [beds[2].pk])

    def test_create_beds_continues_numbering(self):
        occupancy.create_beds(2)
        more = occupancy.create_beds(2)
        self.assertEqual([bed.bed_number for bed in more], [3, 4])


class ProgressTest(TestCase):
    def setUp(self):
        bed = occupancy.create_beds(1)[0]
        self.patient = occupancy.admit(bed.pk, admission_data(medicines="Paracetamol"))

    def test_update_keeps_unspecified_fields(self):
        patient = occupancy.update_progress(self.patient.pk, {"recovery_rate": "60"})

        self.assertEqual(patient.recovery_rate, 60)
        self.assertEqual(patient.medicines, "Paracetamol")
        self.assertEqual(patient.doctor, "Dr. Anil Mehta")

    def test_recovery_rate_is_capped(self):
        with self.assertRaises(ValidationError) as ctx:
            occupancy.update_progress(self.patient.pk, {"recovery_rate": "120"})
        self.assertIn("recovery_rate", ctx.exception.details)

    def test_discharged_patient_cannot_be_updated(self):
        occupancy.discharge(self.patient.pk, "Recovered")
        with self.assertRaises(PatientNotAdmitted):
            occupancy.update_progress(self.patient.pk, {"recovery_rate": "90"})


class DischargedListTest(TestCase):
    def setUp(self):
        beds = occupancy.create_beds(2)
        self.anna = occupancy.admit(beds[0].pk, admission_data(name="Anna Paul"))
        self.ravi = occupancy.admit(beds[1].pk, admission_data(name="Ravi Das", doctor="Dr. Patel"))
        billing.add_expense(self.anna.pk, "Blood Test", "75")
        billing.add_expense(self.ravi.pk, "CT Scan", "500")
        self.anna_summary = occupancy.discharge(self.anna.pk, "Recovered")
        self.ravi_summary = occupancy.discharge(self.ravi.pk, "Recovered")

    def test_lists_every_discharge(self):
        self.assertEqual(len(occupancy.list_discharged()), 2)

    def test_search_by_name_or_doctor(self):
        self.assertEqual([s.pk for s in occupancy.list_discharged(search="anna")], [self.anna_summary.pk])
        self.assertEqual([s.pk for s in occupancy.list_discharged(search="patel")], [self.ravi_summary.pk])

    def test_filter_by_payment_status(self):
        billing.record_payment(self.anna_summary.pk, "75")

        paid = occupancy.list_discharged(payment_status="paid")
        pending = occupancy.list_discharged(payment_status="pending")
        self.assertEqual([s.pk for s in paid], [self.anna_summary.pk])
        self.assertEqual([s.pk for s in pending], [self.ravi_summary.pk])

    def test_discharged_patients_are_kept(self):
        self.assertEqual(Patient.objects.count(), 2)
        self.assertFalse(Patient.objects.filter(bed__isnull=False).exists())


class ReconcileTest(TestCase):
    def setUp(self):
        self.beds = occupancy.create_beds(3)

    def test_consistent_ward_reports_nothing(self):
        occupancy.admit(self.beds[0].pk, admission_data())
        self.assertEqual(occupancy.reconcile(), [])

    def test_detects_and_repairs_mismatches(self):
        # Bed marked admitted with nobody in it
        Bed.objects.filter(pk=self.beds[0].pk).update(status=Bed.PATIENT_ADMITTED)
        # Patient in a bed still marked vacant
        patient = occupancy.admit(self.beds[1].pk, admission_data())
        Bed.objects.filter(pk=self.beds[1].pk).update(status=Bed.VACANT)

        found = occupancy.reconcile()
        kinds = {issue.bed.pk: issue.kind for issue in found}
        self.assertEqual(kinds, {
            self.beds[0].pk: occupancy.ORPHANED_BED,
            self.beds[1].pk: occupancy.UNMARKED_BED,
        })

        occupancy.reconcile(fix=True)

        self.assertEqual(occupancy.reconcile(), [])
        self.assertEqual(Bed.objects.get(pk=self.beds[0].pk).status, Bed.VACANT)
        self.assertEqual(Bed.objects.get(pk=self.beds[1].pk).status, Bed.PATIENT_ADMITTED)
        self.assertEqual(Patient.objects.get(pk=patient.pk).bed_id, self.beds[1].pk)
        assert_occupancy_invariant(self)

    def test_completes_interrupted_discharge(self):
        patient = occupancy.admit(self.beds[2].pk, admission_data())
        DischargeSummary.objects.create(
            patient=patient,
            summary_text="Recovered",
            total_bill="0.00",
            discharge_date=timezone.localdate(),
        )

        found = occupancy.reconcile(fix=True)

        self.assertEqual([issue.kind for issue in found], [occupancy.DISCHARGE_INCOMPLETE])
        patient.refresh_from_db()
        self.assertIsNone(patient.bed_id)
        self.assertEqual(Bed.objects.get(pk=self.beds[2].pk).status, Bed.VACANT)
