# campaigns/models.py
import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class MarketingCampaign(models.Model):
    """Marketing investment in one channel; messages received count as leads"""
    SOURCE_CHOICES = [
        ('Google Ads', 'Google Ads'),
        ('Facebook Ads', 'Facebook Ads'),
        ('Instagram Ads', 'Instagram Ads'),
        ('LinkedIn Ads', 'LinkedIn Ads'),
        ('TikTok Ads', 'TikTok Ads'),
        ('Other', 'Other'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    clinic = models.ForeignKey('clinics.Clinic', on_delete=models.PROTECT, related_name='campaigns')
    name = models.CharField(max_length=200)
    source = models.CharField(max_length=50, choices=SOURCE_CHOICES)
    investment = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    messages_received = models.PositiveIntegerField(null=True, blank=True, help_text="Leads")
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-start_date']
        verbose_name = 'Marketing Campaign'
        verbose_name_plural = 'Marketing Campaigns'
        indexes = [
            models.Index(fields=['clinic', 'start_date'], name='campaign_clinic_start_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.source})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'End date cannot be before the start date.'})
