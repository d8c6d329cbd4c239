from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from .exceptions import ImmutableRecord


ZERO = Decimal("0.00")


# ==============================
# BEDS & INPATIENTS
# ==============================

class Bed(models.Model):
    VACANT = 'vacant'
    UNDER_MAINTENANCE = 'under_maintenance'
    PATIENT_ADMITTED = 'patient_admitted'

    STATUS_CHOICES = [
        (VACANT, 'Vacant'),
        (UNDER_MAINTENANCE, 'Under Maintenance'),
        (PATIENT_ADMITTED, 'Patient Admitted'),
    ]

    bed_number = models.PositiveIntegerField(unique=True, validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=VACANT)

    class Meta:
        ordering = ['bed_number']

    def __str__(self):
        return f"Bed {self.bed_number} ({self.get_status_display()})"

    @property
    def is_vacant(self):
        return self.status == self.VACANT


class Patient(models.Model):
    BLOOD_GROUP_CHOICES = [
        ('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'),
        ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-'),
    ]

    name = models.CharField(max_length=100)
    date_of_birth = models.DateField()
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    phone = models.CharField(max_length=20)
    address = models.TextField(blank=True)
    emergency_contact_name = models.CharField(max_length=100, blank=True)
    emergency_contact_phone = models.CharField(max_length=20, blank=True)

    issue = models.TextField()
    doctor = models.CharField(max_length=100)
    medicines = models.TextField(blank=True)
    recovery_rate = models.PositiveSmallIntegerField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    expected_discharge_date = models.DateTimeField(null=True, blank=True)

    caretaker_name = models.CharField(max_length=100, blank=True)
    caretaker_contact = models.CharField(max_length=20, blank=True)

    admission_date = models.DateTimeField()
    # One-to-one keeps a bed from holding two active patients; NULL once discharged.
    bed = models.OneToOneField(
        Bed,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='patient',
    )

    class Meta:
        ordering = ['-admission_date']

    def __str__(self):
        return self.name

    @property
    def is_admitted(self):
        return self.bed_id is not None


# ==============================
# EXPENSES & DISCHARGE
# ==============================

class Expense(models.Model):
    patient = models.ForeignKey(Patient, related_name='expenses', on_delete=models.PROTECT)
    description = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=20, decimal_places=2, validators=[MinValueValidator(ZERO)])
    expense_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['expense_date', 'id']

    def __str__(self):
        return f"{self.description} - {self.amount}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecord("Expense entries cannot be changed once recorded")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecord("Expense entries cannot be deleted")


class DischargeSummary(models.Model):
    PAYMENT_PENDING = 'pending'
    PAYMENT_PARTIAL = 'partial'
    PAYMENT_PAID = 'paid'

    patient = models.OneToOneField(Patient, related_name='discharge_summary', on_delete=models.PROTECT)
    summary_text = models.TextField()
    total_bill = models.DecimalField(max_digits=20, decimal_places=2)
    discharge_date = models.DateField()
    # Snapshot, the patient's bed reference is cleared at discharge
    bed_number = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-discharge_date', '-id']
        verbose_name_plural = 'discharge summaries'

    def __str__(self):
        return f"Discharge of {self.patient} on {self.discharge_date}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecord("Discharge summaries are write-once")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecord("Discharge summaries cannot be deleted")

    @property
    def amount_paid(self):
        return sum((payment.amount_paid for payment in self.payments.all()), ZERO)

    @property
    def balance_due(self):
        return self.total_bill - self.amount_paid

    @property
    def payment_status(self):
        paid = self.amount_paid
        if paid >= self.total_bill:
            return self.PAYMENT_PAID
        if paid > ZERO:
            return self.PAYMENT_PARTIAL
        return self.PAYMENT_PENDING


class Payment(models.Model):
    PAYMENT_METHODS = [
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('transfer', 'Bank Transfer'),
        ('insurance', 'Insurance'),
    ]

    summary = models.ForeignKey(DischargeSummary, related_name='payments', on_delete=models.PROTECT)
    amount_paid = models.DecimalField(max_digits=20, decimal_places=2)
    payment_mode = models.CharField(max_length=20, choices=PAYMENT_METHODS, default='cash')
    paid_on = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['paid_on', 'id']

    def __str__(self):
        return f"{self.summary.patient} - {self.amount_paid}"


# ==============================
# AUDIT
# ==============================

class AuditLog(models.Model):
    ACTIONS = [('create', 'Create'), ('update', 'Update'), ('delete', 'Delete')]

    action = models.CharField(max_length=10, choices=ACTIONS)
    model_name = models.CharField(max_length=50)
    object_id = models.PositiveIntegerField()
    timestamp = models.DateTimeField(auto_now_add=True)
    description = models.TextField()

    class Meta:
        ordering = ['-timestamp']
