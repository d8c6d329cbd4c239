from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Bed, Patient

BOARD_GROUP = "occupancy_board"


def broadcast_bed(bed_id):
    """Push the committed state of a bed to every open occupancy board."""
    bed = Bed.objects.filter(pk=bed_id).first()
    if bed is None:
        return
    patient = Patient.objects.filter(bed=bed).first()
    layer = get_channel_layer()
    async_to_sync(layer.group_send)(
        BOARD_GROUP,
        {
            "type": "bed_update",   # <- OccupancyConsumer.bed_update
            "bed_id": bed.pk,
            "bed_number": bed.bed_number,
            "status": bed.status,
            "patient_id": patient.pk if patient else None,
            "patient_name": patient.name if patient else None,
        },
    )


@receiver(post_save, sender=Bed)
def notify_bed_change(sender, instance, created, **kwargs):
    transaction.on_commit(lambda: broadcast_bed(instance.pk))


@receiver(post_save, sender=Patient)
def notify_admission(sender, instance, created, **kwargs):
    # Admission claims the bed with a queryset update, which sends no post_save for Bed
    if created and instance.bed_id:
        bed_id = instance.bed_id
        transaction.on_commit(lambda: broadcast_bed(bed_id))
