# patients/models.py
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from core.validation import validate_cpf, validate_phone_number


class Patient(models.Model):
    SOURCE_CHOICES = [
        ('google_ads', 'Google Ads'),
        ('facebook_ads', 'Facebook Ads'),
        ('instagram_ads', 'Instagram Ads'),
        ('referral', 'Referral'),
        ('website', 'Website'),
        ('other', 'Other'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    cpf = models.CharField(max_length=14, blank=True, validators=[validate_cpf], verbose_name='CPF')
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True, validators=[validate_phone_number])
    birth_date = models.DateField(null=True, blank=True)
    address = models.TextField(blank=True)
    insurance = models.CharField(max_length=100, blank=True)
    # How the patient found the clinic; drives the marketing breakdowns
    source = models.CharField(max_length=30, choices=SOURCE_CHOICES, blank=True)
    notes = models.TextField(blank=True)

    clinic = models.ForeignKey(
        'clinics.Clinic', on_delete=models.PROTECT, null=True, blank=True, related_name='patients'
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_patients'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['clinic', 'created_at'], name='patient_clinic_created_idx'),
        ]

    def __str__(self):
        return self.name


class PatientAssignment(models.Model):
    """A clinic staff member responsible for a patient"""
    PRIMARY_CARE = 'primary_care'
    CONSULTING = 'consulting'
    SPECIALIST = 'specialist'

    TYPE_CHOICES = [
        (PRIMARY_CARE, 'Primary care'),
        (CONSULTING, 'Consulting'),
        (SPECIALIST, 'Specialist'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='assignments')
    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='patient_assignments'
    )
    clinic = models.ForeignKey('clinics.Clinic', on_delete=models.CASCADE, related_name='patient_assignments')
    assignment_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=PRIMARY_CARE)
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='+'
    )
    assigned_at = models.DateTimeField(auto_now_add=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['-assigned_at']
        constraints = [
            models.UniqueConstraint(
                fields=['patient', 'staff'],
                condition=models.Q(is_active=True),
                name='unique_active_patient_staff',
                violation_error_message='This staff member is already assigned to the patient.',
            ),
        ]

    def __str__(self):
        return f"{self.staff} → {self.patient} ({self.get_assignment_type_display()})"

    def clean(self):
        super().clean()
        if not self.patient_id or not self.staff_id:
            return
        if self.patient.clinic_id != self.clinic_id:
            raise ValidationError({'clinic': 'Assignments belong to the patient\'s clinic.'})
        if self.staff.clinic_id != self.clinic_id:
            raise ValidationError({'staff': 'Staff member must work at the patient\'s clinic.'})
