# campaigns/apps.py
from django.apps import AppConfig


class CampaignsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'campaigns'

    def ready(self):
        from core.datasource import tables
        from .models import MarketingCampaign

        tables.register('marketing_campaigns', MarketingCampaign)
