# campaigns/views.py
from core.crud import Column, ResourceFormView, ResourceListView
from reports.formatting import format_count, format_currency, format_date

from .forms import CampaignForm
from .repository import CampaignRepository


class CampaignMixin:
    repository_class = CampaignRepository
    form_class = CampaignForm
    url_namespace = 'campaigns'
    verbose_name = 'campaign'
    verbose_name_plural = 'campaigns'


class CampaignListView(CampaignMixin, ResourceListView):
    columns = [
        Column('name', 'Campaign'),
        Column('source', 'Source'),
        Column('investment', 'Investment', format_currency),
        Column('messages_received', 'Leads', format_count),
        Column('cost_per_lead', 'Cost per lead', format_currency),
        Column('start_date', 'Start', format_date),
        Column('end_date', 'End', format_date),
        Column('clinic__name', 'Clinic'),
    ]


class CampaignFormView(CampaignMixin, ResourceFormView):
    pass
