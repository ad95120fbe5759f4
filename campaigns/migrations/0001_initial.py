# Generated migration file
import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('clinics', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MarketingCampaign',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('source', models.CharField(choices=[('Google Ads', 'Google Ads'), ('Facebook Ads', 'Facebook Ads'), ('Instagram Ads', 'Instagram Ads'), ('LinkedIn Ads', 'LinkedIn Ads'), ('TikTok Ads', 'TikTok Ads'), ('Other', 'Other')], max_length=50)),
                ('investment', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('messages_received', models.PositiveIntegerField(blank=True, help_text='Leads', null=True)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('clinic', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='campaigns', to='clinics.clinic')),
            ],
            options={
                'verbose_name': 'Marketing Campaign',
                'verbose_name_plural': 'Marketing Campaigns',
                'ordering': ['-start_date'],
                'indexes': [
                    models.Index(fields=['clinic', 'start_date'], name='campaign_clinic_start_idx'),
                ],
            },
        ),
    ]
