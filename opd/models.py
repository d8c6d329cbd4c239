from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class OPDPatient(models.Model):
    WAITING = 'waiting'
    IN_CONSULTATION = 'in_consultation'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (WAITING, 'Waiting'),
        (IN_CONSULTATION, 'In Consultation'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    name = models.CharField(max_length=100)
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(0), MaxValueValidator(150)])
    contact = models.CharField(max_length=20)
    issue = models.TextField()
    doctor = models.CharField(max_length=100)
    appointment_time = models.TimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=WAITING)
    queue_number = models.PositiveIntegerField(unique=True, editable=False)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['queue_number']
        verbose_name = 'OPD patient'

    def __str__(self):
        return f"#{self.queue_number} {self.name} - {self.status}"
