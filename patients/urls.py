# patients/urls.py
from django.urls import path
from . import views

app_name = 'patients'

urlpatterns = [
    path('', views.PatientListView.as_view(), name='list'),
    path('create/', views.PatientFormView.as_view(), name='create'),
    path('<uuid:pk>/edit/', views.PatientFormView.as_view(), name='update'),
    path('<uuid:pk>/assignments/', views.PatientAssignmentsView.as_view(), name='assignments'),
    path('assignments/<uuid:pk>/deactivate/', views.deactivate_assignment, name='deactivate_assignment'),
]
