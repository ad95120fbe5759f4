# appointments/urls.py
from django.urls import path
from . import views

app_name = 'appointments'

urlpatterns = [
    path('', views.AppointmentListView.as_view(), name='list'),
    path('create/', views.AppointmentFormView.as_view(), name='create'),
    path('<uuid:pk>/edit/', views.AppointmentFormView.as_view(), name='update'),
]
