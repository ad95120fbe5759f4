# clinic_dashboard_project/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('core.urls', namespace='core')),
    path('users/', include('users.urls', namespace='users')),
    path('clinics/', include('clinics.urls', namespace='clinics')),
    path('procedures/', include('procedures.urls', namespace='procedures')),
    path('patients/', include('patients.urls', namespace='patients')),
    path('appointments/', include('appointments.urls', namespace='appointments')),
    path('expenses/', include('expenses.urls', namespace='expenses')),
    path('campaigns/', include('campaigns.urls', namespace='campaigns')),
    path('reports/', include('reports.urls', namespace='reports')),
]
