import logging

from django.db.models import Count, Max, Q

from wards.exceptions import ValidationError
from wards.utils import log_action
from wards.utils.db import atomic_unit, get_or_raise
from .exceptions import InvalidTransition
from .forms import OPDPatientForm
from .models import OPDPatient

logger = logging.getLogger(__name__)

TRANSITIONS = {
    OPDPatient.WAITING: {OPDPatient.IN_CONSULTATION, OPDPatient.CANCELLED},
    OPDPatient.IN_CONSULTATION: {OPDPatient.COMPLETED, OPDPatient.CANCELLED},
    OPDPatient.COMPLETED: set(),
    OPDPatient.CANCELLED: set(),
}


def enqueue(data):
    """Add an outpatient at the back of the queue."""
    form = OPDPatientForm(data)
    if not form.is_valid():
        raise ValidationError.from_form(form)

    with atomic_unit("OPD registration"):
        # queue_number is unique, a concurrent registration fails instead of sharing a number
        last = OPDPatient.objects.aggregate(last=Max("queue_number"))["last"]
        patient = form.save(commit=False)
        patient.queue_number = (last or 0) + 1
        patient.status = OPDPatient.WAITING
        patient.save()
        log_action("create", "OPDPatient", patient.id, f"Queued {patient.name} as #{patient.queue_number}")

    logger.info("OPD patient %s queued as #%s", patient.pk, patient.queue_number)
    return patient


def update_status(opd_id, status):
    with atomic_unit("OPD status update"):
        patient = get_or_raise(OPDPatient.objects.select_for_update(), opd_id, "OPD patient")
        if status not in TRANSITIONS.get(patient.status, set()):
            raise InvalidTransition(
                f"Cannot move {patient.name} from {patient.status} to {status}",
                {"from": patient.status, "to": status},
            )
        patient.status = status
        patient.save(update_fields=["status"])
        log_action("update", "OPDPatient", patient.id, f"{patient.name} is now {status}")
    return patient


def update_details(opd_id, data):
    patient = get_or_raise(OPDPatient, opd_id, "OPD patient")
    form = OPDPatientForm(data, instance=patient)
    if not form.is_valid():
        raise ValidationError.from_form(form)
    with atomic_unit("OPD update"):
        patient = form.save()
        log_action("update", "OPDPatient", patient.id, f"Updated details of {patient.name}")
    return patient


def remove(opd_id):
    patient = get_or_raise(OPDPatient, opd_id, "OPD patient")
    with atomic_unit("OPD removal"):
        log_action("delete", "OPDPatient", patient.id, f"Removed {patient.name} from the queue")
        patient.delete()
    logger.info("OPD patient %s removed from the queue", opd_id)


def list_queue(search=None, status=None):
    queue = OPDPatient.objects.order_by("queue_number")
    if search:
        queue = queue.filter(
            Q(name__icontains=search) | Q(doctor__icontains=search) | Q(contact__contains=search)
        )
    if status:
        queue = queue.filter(status=status)
    return list(queue)


def queue_stats():
    counts = dict(OPDPatient.objects.order_by().values_list("status").annotate(n=Count("id")))
    stats = {status: counts.get(status, 0) for status, _ in OPDPatient.STATUS_CHOICES}
    stats["total"] = sum(counts.values())
    return stats
