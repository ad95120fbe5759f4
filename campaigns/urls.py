# campaigns/urls.py
from django.urls import path
from . import views

app_name = 'campaigns'

urlpatterns = [
    path('', views.CampaignListView.as_view(), name='list'),
    path('create/', views.CampaignFormView.as_view(), name='create'),
    path('<uuid:pk>/edit/', views.CampaignFormView.as_view(), name='update'),
]
