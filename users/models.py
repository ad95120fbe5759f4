# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.Model):
    """
    What a signed-in user may do.

    Admins manage every clinic plus the shared clinic and procedure lists,
    clinic staff read and write their clinic's records, and read-only users
    browse without saving.
    """
    ADMIN = 'admin'
    CLINIC_STAFF = 'clinic_staff'
    READ_ONLY = 'read_only'

    ROLE_CHOICES = [
        (ADMIN, 'Admin'),
        (CLINIC_STAFF, 'Clinic Staff'),
        (READ_ONLY, 'Read Only'),
    ]

    # Roles whose sessions may save records
    WRITER_ROLES = (ADMIN, CLINIC_STAFF)

    name = models.CharField(max_length=50, unique=True, choices=ROLE_CHOICES)
    display_name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.display_name

    @property
    def can_write(self):
        return self.name in self.WRITER_ROLES

    def save(self, *args, **kwargs):
        if not self.display_name:
            self.display_name = dict(self.ROLE_CHOICES).get(self.name, self.name)
        super().save(*args, **kwargs)


class User(AbstractUser):
    role = models.ForeignKey(Role, on_delete=models.PROTECT, null=True, blank=True)
    clinic = models.ForeignKey(
        'clinics.Clinic',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='staff',
        help_text="Clinic this user works at; admins without a clinic see every clinic",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.get_full_name()} ({self.username})"

    @property
    def role_name(self):
        if self.is_superuser:
            return Role.ADMIN
        return self.role.name if self.role else None

    @property
    def is_admin(self):
        return self.role_name == Role.ADMIN

    @property
    def full_name(self):
        return self.get_full_name() or self.username
