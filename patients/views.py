# patients/views.py
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import Http404
from django.shortcuts import redirect
from django.urls import reverse
from django.views.decorators.http import require_POST
from django.views.generic import TemplateView

from core.crud import Column, ResourceFormView, ResourceListView
from core.validation import format_cpf
from reports.formatting import format_date
from users.permissions import AccessDenied, SessionRequiredMixin

from .forms import AssignmentForm, PatientForm
from .models import Patient, PatientAssignment
from .repository import AssignmentRepository, PatientRepository

SOURCE_LABELS = dict(Patient.SOURCE_CHOICES)
ASSIGNMENT_LABELS = dict(PatientAssignment.TYPE_CHOICES)


class PatientMixin:
    repository_class = PatientRepository
    form_class = PatientForm
    url_namespace = 'patients'
    verbose_name = 'patient'
    verbose_name_plural = 'patients'


class PatientListView(PatientMixin, ResourceListView):
    row_actions = [('Staff', 'patients:assignments')]
    columns = [
        Column('name', 'Name'),
        Column('cpf', 'CPF', lambda v: format_cpf(v) if v else '—'),
        Column('phone', 'Phone'),
        Column('email', 'Email'),
        Column('source', 'Source', lambda v: SOURCE_LABELS.get(v, '—')),
        Column('clinic__name', 'Clinic'),
        Column('created_at', 'Registered', format_date),
    ]


class PatientFormView(PatientMixin, ResourceFormView):
    pass


class PatientAssignmentsView(SessionRequiredMixin, TemplateView):
    """Active staff assignments of one patient, with the assign form"""
    template_name = 'patients/patient_assignments.html'

    def dispatch(self, request, *args, **kwargs):
        self.patients = PatientRepository()
        self.assignments = AssignmentRepository()
        return super().dispatch(request, *args, **kwargs)

    def get_patient(self):
        patient = self.patients.get(self.session_context, self.kwargs['pk'])
        if patient is None:
            raise Http404('Patient not found')
        return patient

    def get_context_data(self, form=None, **kwargs):
        context = super().get_context_data(**kwargs)
        patient = self.get_patient()
        assignments = self.assignments.active_for(self.session_context, patient['id'])
        for assignment in assignments:
            assignment['type_label'] = ASSIGNMENT_LABELS.get(assignment['assignment_type'], '')
            full_name = f"{assignment['staff__first_name']} {assignment['staff__last_name']}".strip()
            assignment['staff_name'] = full_name or assignment['staff__username']

        try:
            self.assignments.check_write(self.session_context)
            can_write = True
        except AccessDenied:
            can_write = False

        if form is None and can_write:
            form = AssignmentForm(
                clinic_id=patient['clinic_id'],
                exclude_staff=[a['staff_id'] for a in assignments],
            )

        context.update({
            'patient': patient,
            'assignments': assignments,
            'form': form,
            'can_write': can_write,
        })
        return context

    def post(self, request, *args, **kwargs):
        session = self.session_context
        patient = self.get_patient()
        try:
            self.assignments.check_write(session)
        except AccessDenied as e:
            messages.error(request, e.message)
            return redirect('patients:assignments', pk=patient['id'])

        form = AssignmentForm(request.POST, clinic_id=patient['clinic_id'])
        if not form.is_valid():
            return self.render_to_response(self.get_context_data(form=form))

        result = self.assignments.assign(
            session, patient, form.cleaned_data['staff'].pk, form.cleaned_data['assignment_type'],
        )
        if not result.ok:
            for errors in result.errors.values():
                for error in errors:
                    form.add_error(None, error)
            messages.error(request, result.message)
            return self.render_to_response(self.get_context_data(form=form))

        messages.success(request, 'Staff member assigned successfully.')
        return redirect('patients:assignments', pk=patient['id'])


@login_required
@require_POST
def deactivate_assignment(request, pk):
    """Remove a staff assignment by marking it inactive"""
    session = getattr(request, 'session_context', None)
    repository = AssignmentRepository()
    try:
        assignment = repository.get(session, pk)
        if assignment is None:
            raise Http404('Assignment not found')
        result = repository.deactivate(session, pk)
    except AccessDenied as e:
        messages.error(request, e.message)
        return redirect('core:dashboard')

    if result.ok:
        messages.success(request, 'Assignment removed.')
    else:
        messages.error(request, result.message)
    return redirect(reverse('patients:assignments', args=[assignment['patient_id']]))
