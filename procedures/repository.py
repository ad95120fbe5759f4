# procedures/repository.py
from core.repository import Repository
from users.models import Role


class ProcedureRepository(Repository):
    table = 'procedures'
    module = 'procedures'
    required_role = Role.ADMIN
    clinic_field = None
    list_fields = ('id', 'name', 'code', 'category', 'price', 'cost', 'duration')
    search_fields = ('name', 'code', 'category')
    ordering = ('name',)
