from django.urls import path
from . import views

urlpatterns = [
    path('', views.opd_queue, name='opd_queue'),
    path('stats/', views.opd_stats, name='opd_stats'),
    path('<int:opd_id>/', views.opd_patient, name='opd_patient'),
    path('<int:opd_id>/status/', views.opd_status, name='opd_status'),
]
