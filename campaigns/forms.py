# campaigns/forms.py
from django import forms

from core.forms import DateInput, ResourceForm
from .models import MarketingCampaign


class CampaignForm(ResourceForm):
    class Meta:
        model = MarketingCampaign
        fields = ['clinic', 'name', 'source', 'investment', 'messages_received', 'start_date', 'end_date']
        labels = {
            'messages_received': 'Messages received (leads)',
        }
        widgets = {
            'investment': forms.NumberInput(attrs={'step': '0.01', 'min': '0'}),
            'messages_received': forms.NumberInput(attrs={'min': '0'}),
            'start_date': DateInput(),
            'end_date': DateInput(),
        }

    def clean(self):
        cleaned_data = super().clean()
        start_date = cleaned_data.get('start_date')
        end_date = cleaned_data.get('end_date')
        if start_date and end_date and end_date < start_date:
            self.add_error('end_date', 'End date cannot be before the start date.')
        return cleaned_data
