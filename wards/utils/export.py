from io import BytesIO

from django.conf import settings
from django.template.loader import render_to_string
from django.utils import timezone
from xhtml2pdf import pisa

from wards.exceptions import ExportError
from wards.services import billing


def format_money(amount):
    return f"{settings.CURRENCY_SYMBOL}{amount:,.2f}"


def default_summary_text(patient, discharge_date=None):
    """Pre-filled clinical narrative offered when a discharge is started."""
    discharge_date = discharge_date or timezone.localdate()
    admitted = timezone.localtime(patient.admission_date).date()
    medicines = patient.medicines or "No specific medications prescribed"

    return f"""DISCHARGE SUMMARY

Patient Name: {patient.name}
Date of Birth: {patient.date_of_birth:%d/%m/%Y}
Blood Group: {patient.blood_group}
Admission Date: {admitted:%d/%m/%Y}
Discharge Date: {discharge_date:%d/%m/%Y}

DIAGNOSIS:
{patient.issue}

TREATMENT PROVIDED:
The patient was admitted with {patient.issue.lower()} and received comprehensive medical care under the supervision of {patient.doctor}.

MEDICATIONS PRESCRIBED:
{medicines}

RECOVERY STATUS:
Patient showed {patient.recovery_rate}% recovery during the treatment period.

DISCHARGE INSTRUCTIONS:
1. Continue prescribed medications as directed
2. Follow up with {patient.doctor} in 1-2 weeks
3. Rest and avoid strenuous activities
4. Contact hospital immediately if symptoms worsen

FOLLOW-UP CARE:
Regular monitoring recommended. Next appointment scheduled as per doctor's advice.

Attending Physician: {patient.doctor}
Discharge Date: {discharge_date:%d/%m/%Y}"""


def render_summary_text(summary):
    expenses = billing.list_for(summary.patient_id)
    lines = [f"{expense.description}: {format_money(expense.amount)}" for expense in expenses]
    return (
        f"{summary.summary_text}\n\n"
        "BILLING SUMMARY:\n"
        + "\n".join(lines)
        + f"\n\nTOTAL AMOUNT: {format_money(summary.total_bill)}"
    )


def render_summary_pdf(summary):
    html = render_to_string("wards/discharge_summary.html", {
        "summary": summary,
        "patient": summary.patient,
        "expenses": [
            (expense, format_money(expense.amount))
            for expense in billing.list_for(summary.patient_id)
        ],
        "total": format_money(summary.total_bill),
    })
    buffer = BytesIO()
    pisa_status = pisa.CreatePDF(html, dest=buffer, encoding="UTF-8")
    if pisa_status.err:
        raise ExportError("PDF generation error", {"summary_id": summary.pk})
    return buffer.getvalue()
