# campaigns/admin.py
from django.contrib import admin

from .models import MarketingCampaign


@admin.register(MarketingCampaign)
class MarketingCampaignAdmin(admin.ModelAdmin):
    list_display = ['name', 'source', 'investment', 'messages_received', 'start_date', 'end_date', 'clinic']
    list_filter = ['source', 'clinic']
    search_fields = ['name']
