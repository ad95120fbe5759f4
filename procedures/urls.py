# procedures/urls.py
from django.urls import path
from . import views

app_name = 'procedures'

urlpatterns = [
    path('', views.ProcedureListView.as_view(), name='list'),
    path('create/', views.ProcedureFormView.as_view(), name='create'),
    path('<uuid:pk>/edit/', views.ProcedureFormView.as_view(), name='update'),
]
