"""Per-patient expense ledger and discharge payments.

Amounts are summed in Python with `Decimal`, never by the database.
"""
import logging
from decimal import Decimal

from django.utils import timezone

from wards.exceptions import PatientNotAdmitted, ValidationError
from wards.forms import ExpenseForm, PaymentForm
from wards.models import DischargeSummary, Expense, Patient, ZERO
from wards.utils import log_action
from wards.utils.db import atomic_unit, get_or_raise

logger = logging.getLogger(__name__)

# Quick-pick catalogue offered by the expense dialog
COMMON_EXPENSES = [
    ("X-Ray", Decimal("150")),
    ("CT Scan", Decimal("500")),
    ("MRI Scan", Decimal("800")),
    ("Blood Test", Decimal("75")),
    ("Ultrasound", Decimal("200")),
    ("ECG", Decimal("100")),
    ("Drug Injection", Decimal("50")),
    ("Dressing", Decimal("25")),
    ("Consultation Fee", Decimal("100")),
    ("Surgery Fee", Decimal("2500")),
    ("Room Charges", Decimal("200")),
    ("Nursing Care", Decimal("150")),
]


def add_expense(patient_id, description, amount, expense_date=None):
    patient = get_or_raise(Patient, patient_id, "Patient")

    form = ExpenseForm({
        "description": description,
        "amount": amount,
        "expense_date": expense_date or timezone.localdate(),
    })
    if not form.is_valid():
        logger.warning("Rejected expense for patient %s: %s", patient.pk, form.errors.as_json())
        raise ValidationError.from_form(form)

    with atomic_unit("Expense"):
        # Same row lock as discharge, so the frozen total cannot miss this expense
        patient = get_or_raise(Patient.objects.select_for_update(), patient.pk, "Patient")
        if patient.bed_id is None or DischargeSummary.objects.filter(patient=patient).exists():
            raise PatientNotAdmitted(
                f"{patient} is not admitted; expenses can no longer be added",
                {"patient_id": patient.pk},
            )
        expense = form.save(commit=False)
        expense.patient = patient
        expense.save()
        log_action("create", "Expense", expense.id, f"Added {expense.description} ({expense.amount}) for {patient}")

    logger.info("Expense %s of %s recorded for patient %s", expense.pk, expense.amount, patient.pk)
    return expense


def total_for(patient_id):
    patient = get_or_raise(Patient, patient_id, "Patient")
    amounts = Expense.objects.filter(patient=patient).values_list("amount", flat=True)
    return sum(amounts, ZERO)


def list_for(patient_id):
    patient = get_or_raise(Patient, patient_id, "Patient")
    return list(Expense.objects.filter(patient=patient).order_by("expense_date", "id"))


# =======================================================
# PAYMENTS
# =======================================================

def record_payment(summary_id, amount, payment_mode="cash"):
    """Record a payment against a discharge bill; the balance may never go negative."""
    form = PaymentForm({"amount_paid": amount, "payment_mode": payment_mode})
    if not form.is_valid():
        raise ValidationError.from_form(form)

    with atomic_unit("Payment"):
        summary = get_or_raise(
            DischargeSummary.objects.select_for_update(), summary_id, "Discharge summary"
        )
        payment = form.save(commit=False)
        due = summary.balance_due
        if payment.amount_paid > due:
            raise ValidationError(
                "Payment exceeds the balance due",
                {"amount_paid": [f"Balance due is {due}"]},
            )
        payment.summary = summary
        payment.save()
        log_action("create", "Payment", payment.id, f"Received {payment.amount_paid} for {summary.patient}")

    logger.info("Payment %s of %s recorded against summary %s", payment.pk, payment.amount_paid, summary.pk)
    return payment
