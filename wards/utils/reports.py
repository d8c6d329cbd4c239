from collections import OrderedDict

from django.db.models import Count
from django.db.models.functions import TruncMonth
from django.utils import timezone

from wards.models import Bed, DischargeSummary, Patient, ZERO


def occupancy_snapshot():
    counts = dict(Bed.objects.order_by().values_list("status").annotate(n=Count("id")))
    total = sum(counts.values())
    admitted = counts.get(Bed.PATIENT_ADMITTED, 0)
    rate = round(admitted * 100 / total, 1) if total else 0.0
    return {
        "total_beds": total,
        "vacant": counts.get(Bed.VACANT, 0),
        "under_maintenance": counts.get(Bed.UNDER_MAINTENANCE, 0),
        "patient_admitted": admitted,
        "occupancy_rate": rate,
    }


def period_report(start, end):
    """Admissions, discharges and revenue for discharge dates in [start, end)."""
    admissions = Patient.objects.filter(
        admission_date__date__gte=start, admission_date__date__lt=end
    ).count()
    summaries = list(
        DischargeSummary.objects.filter(discharge_date__gte=start, discharge_date__lt=end)
        .select_related("patient")
        .prefetch_related("payments")
    )

    revenue = sum((s.total_bill for s in summaries), ZERO)
    pending = sum((s.balance_due for s in summaries), ZERO)
    stays = [
        (s.discharge_date - timezone.localtime(s.patient.admission_date).date()).days
        for s in summaries
    ]
    average_stay = round(sum(stays) / len(stays), 1) if stays else 0.0

    return {
        "start": start,
        "end": end,
        "admissions": admissions,
        "discharges": len(summaries),
        "revenue": revenue,
        "pending_payments": pending,
        "average_stay": average_stay,
        **occupancy_snapshot(),
    }


def monthly_trend(months=6):
    """Admissions, discharges and revenue per calendar month, oldest first."""
    today = timezone.localdate()
    year, month = today.year, today.month - (months - 1)
    while month < 1:
        month += 12
        year -= 1
    since = today.replace(year=year, month=month, day=1)

    trend = OrderedDict()
    for offset in range(months):
        m = (since.month - 1 + offset) % 12 + 1
        y = since.year + (since.month - 1 + offset) // 12
        trend[(y, m)] = {"month": f"{y:04d}-{m:02d}", "admissions": 0, "discharges": 0, "revenue": ZERO}

    admissions = (
        Patient.objects.filter(admission_date__date__gte=since)
        .annotate(month=TruncMonth("admission_date"))
        .values("month")
        .annotate(total=Count("id"))
        .order_by("month")
    )
    for entry in admissions:
        key = (entry["month"].year, entry["month"].month)
        if key in trend:
            trend[key]["admissions"] = entry["total"]

    for summary in DischargeSummary.objects.filter(discharge_date__gte=since):
        key = (summary.discharge_date.year, summary.discharge_date.month)
        if key in trend:
            trend[key]["discharges"] += 1
            trend[key]["revenue"] += summary.total_bill

    return list(trend.values())
