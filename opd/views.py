from django.forms.models import model_to_dict
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from wards.views import json_errors
from . import services


def opd_json(patient):
    data = model_to_dict(patient)
    data["id"] = patient.pk
    data["queue_number"] = patient.queue_number
    data["status"] = patient.status
    data["created_at"] = patient.created_at
    return data


@require_http_methods(["GET", "POST"])
@json_errors
def opd_queue(request):
    if request.method == "POST":
        patient = services.enqueue(request.POST)
        return JsonResponse(opd_json(patient), status=201)

    queue = services.list_queue(
        search=request.GET.get("q") or None,
        status=request.GET.get("status") or None,
    )
    return JsonResponse({
        "patients": [opd_json(p) for p in queue],
        "stats": services.queue_stats(),
    })


@require_POST
@json_errors
def opd_status(request, opd_id):
    patient = services.update_status(opd_id, request.POST.get("status", ""))
    return JsonResponse(opd_json(patient))


@require_http_methods(["POST", "DELETE"])
@json_errors
def opd_patient(request, opd_id):
    if request.method == "DELETE":
        services.remove(opd_id)
        return HttpResponse(status=204)
    patient = services.update_details(opd_id, request.POST)
    return JsonResponse(opd_json(patient))


@require_GET
def opd_stats(request):
    return JsonResponse(services.queue_stats())
