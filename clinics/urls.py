# clinics/urls.py
from django.urls import path
from . import views

app_name = 'clinics'

urlpatterns = [
    path('', views.ClinicListView.as_view(), name='list'),
    path('create/', views.ClinicFormView.as_view(), name='create'),
    path('<uuid:pk>/edit/', views.ClinicFormView.as_view(), name='update'),
]
