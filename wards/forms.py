from decimal import Decimal

from django import forms

from .models import Patient, Expense, Payment


# ----------------- ADMISSION -----------------
class AdmissionForm(forms.ModelForm):
    """Intake form; name, date_of_birth, blood_group, phone, issue and doctor are mandatory."""

    class Meta:
        model = Patient
        fields = [
            'name',
            'date_of_birth',
            'blood_group',
            'phone',
            'address',
            'emergency_contact_name',
            'emergency_contact_phone',
            'issue',
            'doctor',
            'medicines',
            'caretaker_name',
            'caretaker_contact',
            'expected_discharge_date',
        ]
        widgets = {
            'date_of_birth': forms.DateInput(attrs={'type': 'date'}),
        }


class ProgressForm(forms.ModelForm):
    class Meta:
        model = Patient
        fields = [
            'recovery_rate',
            'medicines',
            'expected_discharge_date',
            'doctor',
            'caretaker_name',
            'caretaker_contact',
        ]


# ----------------- BILLING -----------------
class ExpenseForm(forms.ModelForm):
    class Meta:
        model = Expense
        fields = ['description', 'amount', 'expense_date']
        widgets = {
            'expense_date': forms.DateInput(attrs={'type': 'date'}),
        }


class DischargeForm(forms.Form):
    summary_text = forms.CharField(widget=forms.Textarea(attrs={'rows': 20}))


class PaymentForm(forms.ModelForm):
    amount_paid = forms.DecimalField(max_digits=20, decimal_places=2, min_value=Decimal("0.01"))

    class Meta:
        model = Payment
        fields = ['amount_paid', 'payment_mode']
