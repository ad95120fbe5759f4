# appointments/repository.py
from core.repository import Repository


class AppointmentRepository(Repository):
    table = 'appointments'
    module = 'appointments'
    list_fields = (
        'id', 'appointment_date', 'appointment_time', 'patient_name', 'procedure_name',
        'status', 'amount', 'payment_status', 'clinic_id', 'clinic__name',
    )
    search_fields = ('patient_name', 'procedure_name', 'status')
    ordering = ('-appointment_date', '-appointment_time')

    def prepare(self, session, fields, creating):
        """Keep the stored names in step with the chosen patient and procedure"""
        fields = super().prepare(session, fields, creating)
        patient = fields.get('patient')
        if patient is not None:
            fields['patient_name'] = patient.name
        if 'procedure' in fields:
            procedure = fields['procedure']
            fields['procedure_name'] = procedure.name if procedure is not None else ''
        return fields
