from datetime import date, timedelta
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.utils import timezone

from wards.exceptions import ExtractionUnavailable
from wards.extraction import extract_admission_data
from wards.models import Bed, Patient
from wards.services import billing, occupancy
from wards.tests.helpers import admission_data
from wards.utils.export import default_summary_text, format_money, render_summary_pdf, render_summary_text
from wards.utils.reports import monthly_trend, occupancy_snapshot, period_report


def fake_extractor(document):
    return {
        "name": "Meera Iyer",
        "blood_group": "B+",
        "phone": "",
        "insurance_id": "XY-123",
    }


class SnapshotTest(TestCase):
    def test_empty_ward(self):
        snapshot = occupancy_snapshot()
        self.assertEqual(snapshot["total_beds"], 0)
        self.assertEqual(snapshot["occupancy_rate"], 0.0)

    def test_counts_by_status(self):
        beds = occupancy.create_beds(4)
        occupancy.admit(beds[0].pk, admission_data())
        Bed.objects.filter(pk=beds[1].pk).update(status=Bed.UNDER_MAINTENANCE)

        snapshot = occupancy_snapshot()

        self.assertEqual(snapshot["total_beds"], 4)
        self.assertEqual(snapshot["vacant"], 2)
        self.assertEqual(snapshot["under_maintenance"], 1)
        self.assertEqual(snapshot["patient_admitted"], 1)
        self.assertEqual(snapshot["occupancy_rate"], 25.0)


class PeriodReportTest(TestCase):
    def setUp(self):
        beds = occupancy.create_beds(3)
        first = occupancy.admit(beds[0].pk, admission_data(name="First"))
        second = occupancy.admit(beds[1].pk, admission_data(name="Second"))
        occupancy.admit(beds[2].pk, admission_data(name="Still Here"))
        billing.add_expense(first.pk, "CT Scan", "500")
        billing.add_expense(second.pk, "X-Ray", "150")
        self.first_summary = occupancy.discharge(first.pk, "Recovered")
        occupancy.discharge(second.pk, "Recovered")
        self.today = timezone.localdate()

    def test_report_for_today(self):
        billing.record_payment(self.first_summary.pk, "200")

        report = period_report(self.today, self.today + timedelta(days=1))

        self.assertEqual(report["admissions"], 3)
        self.assertEqual(report["discharges"], 2)
        self.assertEqual(report["revenue"], Decimal("650.00"))
        self.assertEqual(report["pending_payments"], Decimal("450.00"))
        self.assertEqual(report["average_stay"], 0.0)
        self.assertEqual(report["patient_admitted"], 1)

    def test_end_is_exclusive(self):
        report = period_report(self.today - timedelta(days=1), self.today)
        self.assertEqual(report["discharges"], 0)
        self.assertEqual(report["revenue"], Decimal("0.00"))

    def test_trend_covers_requested_months(self):
        trend = monthly_trend(3)

        self.assertEqual(len(trend), 3)
        self.assertEqual(trend[-1]["month"], f"{self.today:%Y-%m}")
        self.assertEqual(trend[-1]["admissions"], 3)
        self.assertEqual(trend[-1]["discharges"], 2)
        self.assertEqual(trend[-1]["revenue"], Decimal("650.00"))
        self.assertEqual(trend[0]["admissions"], 0)


class ExportTest(TestCase):
    def setUp(self):
        bed = occupancy.create_beds(1)[0]
        self.patient = occupancy.admit(bed.pk, admission_data(medicines="Paracetamol 500mg"))
        billing.add_expense(self.patient.pk, "Blood Test", "75", date(2024, 3, 1))
        billing.add_expense(self.patient.pk, "Surgery Fee", "2500", date(2024, 3, 2))

    def test_format_money(self):
        self.assertEqual(format_money(Decimal("2500")), "₹2,500.00")

    def test_default_summary_text(self):
        text = default_summary_text(self.patient, date(2024, 3, 5))

        self.assertTrue(text.startswith("DISCHARGE SUMMARY"))
        self.assertIn("Patient Name: Rajesh Kumar", text)
        self.assertIn("Date of Birth: 15/06/1985", text)
        self.assertIn("Discharge Date: 05/03/2024", text)
        self.assertIn("Paracetamol 500mg", text)
        self.assertIn("Follow up with Dr. Anil Mehta", text)

    def test_render_summary_text_appends_bill(self):
        summary = occupancy.discharge(self.patient.pk, "Recovered")

        text = render_summary_text(summary)

        self.assertTrue(text.startswith("Recovered\n\nBILLING SUMMARY:\n"))
        self.assertIn("Blood Test: ₹75.00\nSurgery Fee: ₹2,500.00", text)
        self.assertTrue(text.endswith("TOTAL AMOUNT: ₹2,575.00"))

    def test_render_summary_pdf(self):
        summary = occupancy.discharge(self.patient.pk, "Recovered")
        pdf = render_summary_pdf(summary)
        self.assertTrue(pdf.startswith(b"%PDF"))


class ExtractionTest(TestCase):
    def setUp(self):
        self.document = SimpleUploadedFile("referral.pdf", b"%PDF-1.4 referral", content_type="application/pdf")

    @override_settings(DOCUMENT_EXTRACTOR="wards.tests.test_reports_export.fake_extractor")
    def test_keeps_known_non_empty_fields(self):
        data = extract_admission_data(self.document)
        self.assertEqual(data, {"name": "Meera Iyer", "blood_group": "B+"})
        self.assertFalse(Patient.objects.exists())

    @override_settings(DOCUMENT_EXTRACTOR="")
    def test_unconfigured_extractor(self):
        with self.assertRaises(ExtractionUnavailable):
            extract_admission_data(self.document)

    @override_settings(DOCUMENT_EXTRACTOR="wards.tests.no_such_module.extract")
    def test_missing_extractor(self):
        with self.assertRaises(ExtractionUnavailable):
            extract_admission_data(self.document)
