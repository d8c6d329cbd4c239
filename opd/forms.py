from django import forms
from django.forms.widgets import TimeInput, Textarea
from .models import OPDPatient


class OPDPatientForm(forms.ModelForm):
    class Meta:
        model = OPDPatient
        fields = ['name', 'age', 'contact', 'issue', 'doctor', 'appointment_time', 'notes']
        widgets = {
            'appointment_time': TimeInput(attrs={'type': 'time'}, format='%H:%M'),
            'notes': Textarea(attrs={'rows': 3}),
        }
