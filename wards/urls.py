from django.urls import path
from . import views

urlpatterns = [
    # Occupancy board & admission
    path('beds/', views.bed_board, name='bed_board'),
    path('beds/vacant/', views.vacant_beds, name='vacant_beds'),
    path('beds/<int:bed_id>/admit/', views.admit_patient, name='admit_patient'),
    path('admissions/extract/', views.extract_document, name='extract_document'),

    # Patients
    path('patients/<int:patient_id>/', views.patient_detail, name='patient_detail'),
    path('patients/<int:patient_id>/progress/', views.update_progress, name='update_progress'),
    path('patients/<int:patient_id>/expenses/', views.patient_expenses, name='patient_expenses'),
    path('expenses/common/', views.common_expenses, name='common_expenses'),

    # Discharge
    path('patients/<int:patient_id>/discharge/draft/', views.discharge_draft, name='discharge_draft'),
    path('patients/<int:patient_id>/discharge/', views.discharge_patient, name='discharge_patient'),
    path('discharged/', views.discharged_patients, name='discharged_patients'),
    path('summaries/<int:summary_id>/', views.summary_detail, name='summary_detail'),
    path('summaries/<int:summary_id>/download/', views.download_summary_text, name='download_summary_text'),
    path('summaries/<int:summary_id>/pdf/', views.download_summary_pdf, name='download_summary_pdf'),
    path('summaries/<int:summary_id>/payments/', views.record_payment, name='record_payment'),

    # Reports
    path('reports/', views.hospital_report, name='hospital_report'),
    path('reports/trend/', views.report_trend, name='report_trend'),
]
