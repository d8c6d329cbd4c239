from datetime import timedelta
from functools import wraps

from django.forms.models import model_to_dict
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from .exceptions import HospitalError, ValidationError
from .extraction import extract_admission_data
from .models import DischargeSummary
from .services import billing, occupancy
from .utils.db import get_or_raise
from .utils.export import default_summary_text, render_summary_pdf, render_summary_text
from .utils.reports import monthly_trend, period_report


def json_errors(view):
    """Turn ward service errors into JSON responses with the matching status code."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except HospitalError as exc:
            return JsonResponse(
                {"error": exc.message, "details": exc.details},
                status=exc.status_code,
            )
    return wrapper


# =======================================================
# SERIALIZATION
# =======================================================

def bed_json(bed):
    return {"id": bed.pk, "bed_number": bed.bed_number, "status": bed.status}


def patient_json(patient):
    data = model_to_dict(patient)
    data["id"] = patient.pk
    data["bed_id"] = data.pop("bed")
    return data


def expense_json(expense):
    return {
        "id": expense.pk,
        "patient_id": expense.patient_id,
        "description": expense.description,
        "amount": expense.amount,
        "expense_date": expense.expense_date,
    }


def summary_json(summary):
    return {
        "id": summary.pk,
        "patient_id": summary.patient_id,
        "patient_name": summary.patient.name,
        "bed_number": summary.bed_number,
        "summary_text": summary.summary_text,
        "total_bill": summary.total_bill,
        "discharge_date": summary.discharge_date,
        "amount_paid": summary.amount_paid,
        "balance_due": summary.balance_due,
        "payment_status": summary.payment_status,
    }


def _date_param(value, name):
    if not value:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError("Invalid date", {name: [f"Expected YYYY-MM-DD, got {value!r}"]})
    return parsed


# =======================================================
# OCCUPANCY BOARD & ADMISSION
# =======================================================

@require_GET
def bed_board(request):
    board = [
        {**bed_json(bed), "patient": patient_json(patient) if patient else None}
        for bed, patient in occupancy.list_beds_with_occupants()
    ]
    return JsonResponse({"beds": board})


@require_GET
def vacant_beds(request):
    return JsonResponse({"beds": [bed_json(bed) for bed in occupancy.vacant_beds()]})


@require_POST
@json_errors
def admit_patient(request, bed_id):
    patient = occupancy.admit(bed_id, request.POST)
    return JsonResponse(patient_json(patient), status=201)


@require_POST
@json_errors
def extract_document(request):
    document = request.FILES.get("document")
    if document is None:
        raise ValidationError("No document uploaded", {"document": ["This field is required."]})
    return JsonResponse({"fields": extract_admission_data(document)})


@require_GET
@json_errors
def patient_detail(request, patient_id):
    return JsonResponse(patient_json(occupancy.get_patient(patient_id)))


@require_POST
@json_errors
def update_progress(request, patient_id):
    patient = occupancy.update_progress(patient_id, request.POST)
    return JsonResponse(patient_json(patient))


# =======================================================
# EXPENSES
# =======================================================

@require_http_methods(["GET", "POST"])
@json_errors
def patient_expenses(request, patient_id):
    if request.method == "POST":
        expense = billing.add_expense(
            patient_id,
            request.POST.get("description", ""),
            request.POST.get("amount"),
            _date_param(request.POST.get("expense_date"), "expense_date"),
        )
        return JsonResponse(expense_json(expense), status=201)

    expenses = billing.list_for(patient_id)
    return JsonResponse({
        "expenses": [expense_json(e) for e in expenses],
        "total": billing.total_for(patient_id),
    })


@require_GET
def common_expenses(request):
    return JsonResponse({
        "expenses": [{"description": name, "amount": price} for name, price in billing.COMMON_EXPENSES]
    })


# =======================================================
# DISCHARGE
# =======================================================

@require_GET
@json_errors
def discharge_draft(request, patient_id):
    patient = occupancy.get_patient(patient_id)
    return JsonResponse({
        "summary_text": default_summary_text(patient),
        "expenses": [expense_json(e) for e in billing.list_for(patient.pk)],
        "total": billing.total_for(patient.pk),
    })


@require_POST
@json_errors
def discharge_patient(request, patient_id):
    summary = occupancy.discharge(patient_id, request.POST.get("summary_text", ""))
    return JsonResponse(summary_json(summary), status=201)


@require_GET
def discharged_patients(request):
    summaries = occupancy.list_discharged(
        search=request.GET.get("q") or None,
        payment_status=request.GET.get("payment_status") or None,
    )
    return JsonResponse({"patients": [summary_json(s) for s in summaries]})


@require_GET
@json_errors
def summary_detail(request, summary_id):
    summary = get_or_raise(DischargeSummary.objects.select_related("patient"), summary_id, "Discharge summary")
    return JsonResponse(summary_json(summary))


@require_GET
@json_errors
def download_summary_text(request, summary_id):
    summary = get_or_raise(DischargeSummary.objects.select_related("patient"), summary_id, "Discharge summary")
    response = HttpResponse(render_summary_text(summary), content_type="text/plain; charset=utf-8")
    filename = f"discharge_summary_{summary.patient.name.replace(' ', '_')}.txt"
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


@require_GET
@json_errors
def download_summary_pdf(request, summary_id):
    summary = get_or_raise(DischargeSummary.objects.select_related("patient"), summary_id, "Discharge summary")
    response = HttpResponse(render_summary_pdf(summary), content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="discharge_summary_{summary.pk}.pdf"'
    return response


@require_POST
@json_errors
def record_payment(request, summary_id):
    payment = billing.record_payment(
        summary_id,
        request.POST.get("amount"),
        request.POST.get("payment_mode", "cash"),
    )
    return JsonResponse(summary_json(payment.summary), status=201)


# =======================================================
# REPORTS
# =======================================================

@require_GET
@json_errors
def hospital_report(request):
    end = _date_param(request.GET.get("end"), "end") or timezone.localdate() + timedelta(days=1)
    start = _date_param(request.GET.get("start"), "start") or end - timedelta(days=30)
    if start >= end:
        raise ValidationError("Invalid period", {"start": ["Start must be before end"]})
    return JsonResponse(period_report(start, end))


@require_GET
@json_errors
def report_trend(request):
    try:
        months = int(request.GET.get("months", 6))
    except ValueError:
        raise ValidationError("Invalid months", {"months": ["Expected a whole number"]}) from None
    if not 1 <= months <= 24:
        raise ValidationError("Invalid months", {"months": ["Must be between 1 and 24"]})
    return JsonResponse({"months": monthly_trend(months)})
