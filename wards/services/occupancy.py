"""Bed occupancy ledger: admission, discharge and the occupancy board.

A bed is `patient_admitted` exactly when one patient references it. Every
command that touches both sides runs in a single transaction.
"""
import logging
from collections import namedtuple
from datetime import timedelta

from django.conf import settings
from django.db.models import Max, Q
from django.forms.models import model_to_dict
from django.utils import timezone

from wards.exceptions import BedUnavailable, PatientNotAdmitted, ValidationError
from wards.forms import AdmissionForm, DischargeForm, ProgressForm
from wards.models import Bed, DischargeSummary, Patient
from wards.utils import log_action
from wards.utils.db import atomic_unit, get_or_raise
from . import billing

logger = logging.getLogger(__name__)

DISCHARGE_INCOMPLETE = "discharge_incomplete"
ORPHANED_BED = "orphaned_bed"
UNMARKED_BED = "unmarked_bed"

Inconsistency = namedtuple("Inconsistency", "kind bed patient")


# =======================================================
# ADMISSION & DISCHARGE
# =======================================================

def admit(bed_id, patient_data):
    bed = get_or_raise(Bed, bed_id, "Bed")
    if not bed.is_vacant:
        logger.warning("Bed %s is %s, admission refused", bed.bed_number, bed.status)
        raise BedUnavailable(
            f"Bed {bed.bed_number} is not vacant",
            {"bed_id": bed.pk, "status": bed.status},
        )

    form = AdmissionForm(patient_data)
    if not form.is_valid():
        logger.warning("Rejected admission to bed %s: %s", bed_id, form.errors.as_json())
        raise ValidationError.from_form(form)

    with atomic_unit("Admission"):
        bed = get_or_raise(Bed.objects.select_for_update(), bed_id, "Bed")
        # Conditional update so two admissions cannot both claim the bed
        claimed = Bed.objects.filter(pk=bed.pk, status=Bed.VACANT).update(status=Bed.PATIENT_ADMITTED)
        if not claimed:
            logger.warning("Bed %s is %s, admission refused", bed.bed_number, bed.status)
            raise BedUnavailable(
                f"Bed {bed.bed_number} is not vacant",
                {"bed_id": bed.pk, "status": bed.status},
            )
        bed.status = Bed.PATIENT_ADMITTED

        now = timezone.now()
        patient = form.save(commit=False)
        patient.bed = bed
        patient.admission_date = now
        patient.recovery_rate = 0
        if patient.expected_discharge_date is None:
            patient.expected_discharge_date = now + timedelta(days=settings.DEFAULT_STAY_DAYS)
        patient.save()
        log_action("create", "Patient", patient.id, f"Admitted {patient} to bed {bed.bed_number}")

    logger.info("Admitted patient %s to bed %s", patient.pk, bed.bed_number)
    return patient


def discharge(patient_id, summary_text, discharge_date=None):
    """Bill the stay, write the discharge summary and free the bed.

    The summary, the vacant bed and the cleared patient reference commit
    together. A summary left behind by an earlier interrupted discharge is
    reused so a retry never bills the patient twice.
    """
    patient = get_or_raise(Patient, patient_id, "Patient")
    if patient.bed_id is None:
        raise PatientNotAdmitted(f"{patient} is not currently admitted", {"patient_id": patient.pk})

    form = DischargeForm({"summary_text": summary_text})
    if not form.is_valid():
        raise ValidationError.from_form(form)

    with atomic_unit("Discharge"):
        patient = get_or_raise(Patient.objects.select_for_update(), patient_id, "Patient")
        if patient.bed_id is None:
            raise PatientNotAdmitted(f"{patient} is not currently admitted", {"patient_id": patient.pk})
        bed = Bed.objects.select_for_update().get(pk=patient.bed_id)

        summary = DischargeSummary.objects.filter(patient=patient).first()
        if summary is None:
            summary = DischargeSummary.objects.create(
                patient=patient,
                summary_text=form.cleaned_data["summary_text"],
                total_bill=billing.total_for(patient.pk),
                discharge_date=discharge_date or timezone.localdate(),
                bed_number=bed.bed_number,
            )
            log_action("create", "DischargeSummary", summary.id, f"Discharged {patient}, bill {summary.total_bill}")
        else:
            logger.warning("Completing interrupted discharge of patient %s (summary %s)", patient.pk, summary.pk)

        bed.status = Bed.VACANT
        bed.save(update_fields=["status"])
        patient.bed = None
        patient.save(update_fields=["bed"])

    logger.info("Discharged patient %s from bed %s, total bill %s", patient.pk, bed.bed_number, summary.total_bill)
    return summary


def update_progress(patient_id, data):
    """Update the clinical progress fields of an admitted patient; absent keys keep their value."""
    patient = get_or_raise(Patient, patient_id, "Patient")
    if not patient.is_admitted:
        raise PatientNotAdmitted(f"{patient} is not currently admitted", {"patient_id": patient.pk})

    values = model_to_dict(patient, fields=ProgressForm._meta.fields)
    values.update({key: value for key, value in data.items() if key in values})
    form = ProgressForm(values, instance=patient)
    if not form.is_valid():
        raise ValidationError.from_form(form)

    with atomic_unit("Progress update"):
        patient = form.save()
        log_action("update", "Patient", patient.id, f"Progress {patient.recovery_rate}% for {patient}")
    return patient


# =======================================================
# QUERIES
# =======================================================

def get_patient(patient_id):
    return get_or_raise(Patient.objects.select_related("bed"), patient_id, "Patient")


def list_beds_with_occupants():
    occupants = {p.bed_id: p for p in Patient.objects.filter(bed__isnull=False)}
    return [(bed, occupants.get(bed.pk)) for bed in Bed.objects.order_by("bed_number")]


def vacant_beds():
    return list(Bed.objects.filter(status=Bed.VACANT).order_by("bed_number"))


def list_discharged(search=None, payment_status=None):
    """Discharged patients, newest discharge first.

    Patients are not archived elsewhere: a discharge summary is what marks
    a patient as discharged.
    """
    summaries = (
        DischargeSummary.objects.select_related("patient")
        .prefetch_related("payments")
        .order_by("-discharge_date", "-id")
    )
    if search:
        summaries = summaries.filter(
            Q(patient__name__icontains=search)
            | Q(patient__phone__icontains=search)
            | Q(patient__doctor__icontains=search)
        )
    summaries = list(summaries)
    if payment_status:
        summaries = [s for s in summaries if s.payment_status == payment_status]
    return summaries


# =======================================================
# BED SETUP & RECONCILIATION
# =======================================================

def create_beds(count, start=None):
    if start is None:
        start = (Bed.objects.aggregate(last=Max("bed_number"))["last"] or 0) + 1
    with atomic_unit("Bed setup"):
        beds = Bed.objects.bulk_create(
            [Bed(bed_number=number) for number in range(start, start + count)]
        )
    logger.info("Created %d beds starting at %d", len(beds), start)
    return beds


def find_inconsistencies():
    occupants = {p.bed_id: p for p in Patient.objects.filter(bed__isnull=False)}
    discharged = set(DischargeSummary.objects.values_list("patient_id", flat=True))

    found = []
    for bed in Bed.objects.order_by("bed_number"):
        patient = occupants.get(bed.pk)
        if patient is not None and patient.pk in discharged:
            found.append(Inconsistency(DISCHARGE_INCOMPLETE, bed, patient))
        elif patient is None and bed.status == Bed.PATIENT_ADMITTED:
            found.append(Inconsistency(ORPHANED_BED, bed, None))
        elif patient is not None and bed.status != Bed.PATIENT_ADMITTED:
            found.append(Inconsistency(UNMARKED_BED, bed, patient))
    return found


def reconcile(fix=False):
    """Report Bed/Patient mismatches and, with fix=True, repair them."""
    found = find_inconsistencies()
    if not fix:
        return found

    for issue in found:
        with atomic_unit("Reconciliation"):
            bed = issue.bed
            if issue.kind == UNMARKED_BED:
                bed.status = Bed.PATIENT_ADMITTED
            else:
                bed.status = Bed.VACANT
            bed.save(update_fields=["status"])
            if issue.kind == DISCHARGE_INCOMPLETE:
                issue.patient.bed = None
                issue.patient.save(update_fields=["bed"])
            log_action("update", "Bed", bed.id, f"Reconciled {issue.kind} on bed {bed.bed_number}")
        logger.info("Repaired %s on bed %s", issue.kind, bed.bed_number)
    return found
