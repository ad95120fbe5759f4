# appointments/models.py
import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

PAYMENT_METHOD_CHOICES = [
    ('cash', 'Cash'),
    ('card', 'Card'),
    ('pix', 'PIX'),
    ('transfer', 'Bank transfer'),
    ('boleto', 'Boleto'),
]


class Appointment(models.Model):
    """
    A scheduled, completed or canceled visit.

    Revenue reports sum ``amount`` over every appointment in the period,
    whatever its status.
    """
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELED = 'canceled'

    STATUS_CHOICES = [
        (SCHEDULED, 'Scheduled'),
        (COMPLETED, 'Completed'),
        (CANCELED, 'Canceled'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('partial', 'Partially paid'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    clinic = models.ForeignKey('clinics.Clinic', on_delete=models.PROTECT, related_name='appointments')

    # Names are kept alongside the links so history survives renames and deletions
    patient = models.ForeignKey(
        'patients.Patient', on_delete=models.SET_NULL, null=True, blank=True, related_name='appointments'
    )
    patient_name = models.CharField(max_length=200, blank=True)
    procedure = models.ForeignKey(
        'procedures.Procedure', on_delete=models.SET_NULL, null=True, blank=True, related_name='appointments'
    )
    procedure_name = models.CharField(max_length=200, blank=True)

    appointment_date = models.DateField()
    appointment_time = models.TimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=SCHEDULED)

    amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Defaults to the procedure price"
    )
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, blank=True)
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_appointments'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-appointment_date', '-appointment_time']
        indexes = [
            models.Index(fields=['clinic', 'appointment_date'], name='appt_clinic_date_idx'),
            models.Index(fields=['status'], name='appt_status_idx'),
        ]

    def __str__(self):
        return f"{self.patient_name} - {self.procedure_name or 'Appointment'} on {self.appointment_date}"

    def clean(self):
        """Fill names and amount from the linked records and check the clinic"""
        if self.patient_id:
            if not self.patient_name:
                self.patient_name = self.patient.name
            if self.patient.clinic_id and self.clinic_id and self.patient.clinic_id != self.clinic_id:
                raise ValidationError({'patient': 'Patient belongs to a different clinic.'})

        if self.procedure_id:
            if not self.procedure_name:
                self.procedure_name = self.procedure.name
            if self.amount is None:
                self.amount = self.procedure.price

        if not self.patient_name:
            raise ValidationError({'patient_name': 'Please choose a patient or enter a name.'})
