# clinics/repository.py
from core.repository import Repository
from users.models import Role


class ClinicRepository(Repository):
    table = 'clinics'
    module = 'clinics'
    required_role = Role.ADMIN
    clinic_field = None
    list_fields = ('id', 'name', 'created_at')
    search_fields = ('name',)
    ordering = ('name',)
