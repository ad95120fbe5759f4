# campaigns/repository.py
from core.repository import Repository
from reports.metrics import ratio


class CampaignRepository(Repository):
    table = 'marketing_campaigns'
    module = 'campaigns'
    list_fields = (
        'id', 'name', 'source', 'investment', 'messages_received',
        'start_date', 'end_date', 'clinic_id', 'clinic__name',
    )
    search_fields = ('name', 'source')
    ordering = ('-start_date',)

    def list(self, session, filters=None, search=None, ordering=None):
        records = super().list(session, filters=filters, search=search, ordering=ordering)
        for record in records:
            record['cost_per_lead'] = ratio(record.get('investment'), record.get('messages_received'))
        return records
