# campaigns/tests.py
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from clinics.models import Clinic
from core.testing import make_user
from users.models import Role
from users.session import SessionContext

from .forms import CampaignForm
from .models import MarketingCampaign
from .repository import CampaignRepository


class CampaignTest(TestCase):

    def setUp(self):
        self.clinic = Clinic.objects.create(name='Centro')
        self.staff = make_user('staff', Role.CLINIC_STAFF, clinic=self.clinic)

    def test_end_before_start_is_rejected(self):
        campaign = MarketingCampaign(
            clinic=self.clinic, name='Verão', source='Google Ads',
            start_date=date(2024, 3, 10), end_date=date(2024, 3, 1),
        )
        with self.assertRaises(ValidationError):
            campaign.full_clean()

        form = CampaignForm(data={
            'clinic': str(self.clinic.pk), 'name': 'Verão', 'source': 'Google Ads',
            'start_date': '2024-03-10', 'end_date': '2024-03-01',
        })
        self.assertFalse(form.is_valid())
        self.assertIn('end_date', form.errors)

    def test_cost_per_lead(self):
        MarketingCampaign.objects.create(
            clinic=self.clinic, name='Verão', source='Instagram Ads',
            investment=Decimal('500'), messages_received=20, start_date=date(2024, 3, 1),
        )
        MarketingCampaign.objects.create(
            clinic=self.clinic, name='Sem leads', source='Other',
            investment=Decimal('100'), start_date=date(2024, 2, 1),
        )

        records = CampaignRepository().list(SessionContext.for_user(self.staff))

        self.assertEqual(records[0]['cost_per_lead'], Decimal('25'))
        self.assertEqual(records[1]['cost_per_lead'], Decimal('0'))

    def test_create_view(self):
        self.client.force_login(self.staff)
        response = self.client.post(reverse('campaigns:create'), {
            'name': 'Black Friday',
            'source': 'Facebook Ads',
            'investment': '1200.00',
            'messages_received': '48',
            'start_date': '2024-11-20',
        })
        self.assertRedirects(response, reverse('campaigns:list'), fetch_redirect_response=False)
        campaign = MarketingCampaign.objects.get()
        self.assertEqual(campaign.clinic, self.clinic)

        response = self.client.get(reverse('campaigns:list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_count'], 1)
