# expenses/urls.py
from django.urls import path
from . import views

app_name = 'expenses'

urlpatterns = [
    path('', views.ExpenseListView.as_view(), name='list'),
    path('create/', views.ExpenseFormView.as_view(), name='create'),
    path('<uuid:pk>/edit/', views.ExpenseFormView.as_view(), name='update'),
]
