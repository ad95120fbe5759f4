# expenses/models.py
import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from appointments.models import PAYMENT_METHOD_CHOICES


class Expense(models.Model):
    CATEGORY_CHOICES = [
        ('marketing', 'Marketing'),
        ('equipment', 'Equipment'),
        ('rent', 'Rent'),
        ('supplies', 'Supplies'),
        ('staff', 'Staff'),
        ('other', 'Other'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    clinic = models.ForeignKey('clinics.Clinic', on_delete=models.PROTECT, related_name='expenses')
    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, blank=True)
    date = models.DateField()
    supplier = models.CharField(max_length=200, blank=True)
    invoice_number = models.CharField(max_length=50, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    is_recurring = models.BooleanField(default=False)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_expenses'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date']
        indexes = [
            models.Index(fields=['clinic', 'date'], name='expense_clinic_date_idx'),
        ]

    def __str__(self):
        return f"{self.description} ({self.amount})"
