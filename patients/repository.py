# patients/repository.py
from core.repository import Repository


class PatientRepository(Repository):
    table = 'patients'
    module = 'patients'
    list_fields = (
        'id', 'name', 'cpf', 'email', 'phone', 'source', 'insurance',
        'clinic_id', 'clinic__name', 'created_at',
    )
    search_fields = ('name', 'cpf', 'email', 'phone')
    ordering = ('name',)


class AssignmentRepository(Repository):
    """Staff assignments of a patient; removal only deactivates"""
    table = 'patient_assignments'
    module = 'patients'
    list_fields = (
        'id', 'patient_id', 'staff_id', 'staff__username', 'staff__first_name', 'staff__last_name',
        'assignment_type', 'assigned_at', 'is_active', 'clinic_id',
    )
    ordering = ('-assigned_at',)

    def active_for(self, session, patient_id):
        return self.list(session, filters={'patient_id': patient_id, 'is_active': True})

    def assign(self, session, patient, staff_id, assignment_type):
        return self.create(session, {
            'patient_id': patient['id'],
            'staff_id': staff_id,
            'clinic_id': patient['clinic_id'],
            'assignment_type': assignment_type,
            'assigned_by_id': session.user_id,
        })

    def deactivate(self, session, pk):
        return self.update(session, pk, {'is_active': False})
