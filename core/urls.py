# core/urls.py
from django.urls import path
from . import views
from .health_check import health_check

app_name = 'core'

urlpatterns = [
    path('', views.DashboardView.as_view(), name='dashboard'),
    path('health/', health_check, name='health_check'),
]
