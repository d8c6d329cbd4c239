from django.contrib import admin
from .models import OPDPatient


class OPDPatientAdmin(admin.ModelAdmin):
    list_display = ['queue_number', 'name', 'doctor', 'appointment_time', 'status']
    list_filter = ['status', 'doctor']
    search_fields = ['name', 'contact', 'doctor']


admin.site.register(OPDPatient, OPDPatientAdmin)
