from django.contrib import admin
from .models import Bed, Patient, Expense, DischargeSummary, Payment, AuditLog


class BedAdmin(admin.ModelAdmin):
    list_display = ['bed_number', 'status']
    list_filter = ['status']


class ExpenseInline(admin.TabularInline):
    model = Expense
    extra = 0
    can_delete = False
    readonly_fields = ['description', 'amount', 'expense_date']

    def has_add_permission(self, request, obj=None):
        return False


class PatientAdmin(admin.ModelAdmin):
    inlines = [ExpenseInline]
    list_display = ['name', 'bed', 'doctor', 'admission_date', 'recovery_rate']
    search_fields = ['name', 'phone', 'doctor']
    # Bed assignment goes through admission and discharge only
    readonly_fields = ['bed', 'admission_date']


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    can_delete = False


class DischargeSummaryAdmin(admin.ModelAdmin):
    inlines = [PaymentInline]
    list_display = ['patient', 'bed_number', 'total_bill', 'discharge_date']

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


admin.site.register(Bed, BedAdmin)
admin.site.register(Patient, PatientAdmin)
admin.site.register(DischargeSummary, DischargeSummaryAdmin)
admin.site.register(AuditLog)
