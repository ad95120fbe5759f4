# clinics/models.py
import uuid

from django.db import models


class Clinic(models.Model):
    """A tenant: every patient, appointment, expense and campaign belongs to one"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name
