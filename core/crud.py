# core/crud.py
"""
Generic list and create/edit views for the resource screens.

A screen is declared by binding a ``Repository`` subclass and a
``ResourceForm`` to these views; the views own the access-denied state, the
search box, and the insert-or-update flow that refetches the list on success.
"""
import logging

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect
from django.urls import reverse
from django.views.generic import FormView, TemplateView

from users.permissions import AccessDenied, SessionRequiredMixin

logger = logging.getLogger(__name__)


class Column:
    """One column of a resource list"""

    def __init__(self, field, label, formatter=None):
        self.field = field
        self.label = label
        self.formatter = formatter

    def render(self, record):
        value = record.get(self.field)
        if self.formatter is not None:
            return self.formatter(value)
        if value is None or value == '':
            return '—'
        return value


class ResourceMixin(SessionRequiredMixin):
    repository_class = None
    form_class = None
    url_namespace = None
    verbose_name = 'record'
    verbose_name_plural = 'records'

    def dispatch(self, request, *args, **kwargs):
        self.repository = self.get_repository()
        return super().dispatch(request, *args, **kwargs)

    def get_repository(self):
        return self.repository_class()

    def check_access(self, session):
        super().check_access(session)
        self.repository.check_read(session)

    def get_list_url(self):
        return reverse(f'{self.url_namespace}:list')

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update({
            'verbose_name': self.verbose_name,
            'verbose_name_plural': self.verbose_name_plural,
            'list_url': self.get_list_url(),
            'create_url': reverse(f'{self.url_namespace}:create'),
            'url_namespace': self.url_namespace,
        })
        return context


class ResourceListView(ResourceMixin, TemplateView):
    """Grid of every row the session can see, with free-text search"""
    template_name = 'core/resource_list.html'
    columns = []
    # Extra per-row links as (label, url name taking the row id)
    row_actions = []

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        search = self.request.GET.get('search', '').strip()
        records = self.repository.list(self.session_context, search=search)

        rows = [
            {
                'id': record.get('id'),
                'edit_url': reverse(f'{self.url_namespace}:update', args=[record.get('id')]),
                'actions': [
                    {'label': label, 'url': reverse(url_name, args=[record.get('id')])}
                    for label, url_name in self.row_actions
                ],
                'cells': [column.render(record) for column in self.columns],
            }
            for record in records
        ]

        context.update({
            'columns': self.columns,
            'rows': rows,
            'search': search,
            'total_count': len(rows),
            'can_write': self.can_write(),
        })
        return context

    def can_write(self):
        try:
            self.repository.check_write(self.session_context)
        except AccessDenied:
            return False
        return True


class ResourceFormView(ResourceMixin, FormView):
    """
    Create or edit one row.

    The same view serves both: without a ``pk`` it inserts, with one it
    updates. Write failures are attached to the form and nothing else changes.
    """
    template_name = 'core/resource_form.html'

    def check_access(self, session):
        # Writes are denied before any payload is looked at
        super().check_access(session)
        self.repository.check_write(session)

    def dispatch(self, request, *args, **kwargs):
        self.pk = kwargs.get('pk')
        self.record = None
        return super().dispatch(request, *args, **kwargs)

    def get_record(self):
        if self.pk is None:
            return None
        if self.record is None:
            self.record = self.repository.get(self.session_context, self.pk)
            if self.record is None:
                raise Http404(f'{self.verbose_name.capitalize()} not found')
        return self.record

    def get_initial(self):
        initial = super().get_initial()
        record = self.get_record()
        if record is not None:
            initial.update(self.repository.form_initial(record))
        return initial

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs['session'] = self.session_context
        return kwargs

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update({
            'is_update': self.pk is not None,
            'record': self.get_record(),
        })
        return context

    def get_write_fields(self, form):
        return dict(form.cleaned_data)

    def form_valid(self, form):
        result = self.repository.save(self.session_context, self.get_write_fields(form), pk=self.pk)

        if not result.ok:
            for name, errors in result.errors.items():
                form.add_error(name if name in form.fields else None, errors)
            if not result.errors:
                form.add_error(None, result.message)
            messages.error(self.request, result.message)
            return self.form_invalid(form)

        if self.pk is None:
            messages.success(self.request, f'{self.verbose_name.capitalize()} created successfully.')
        else:
            messages.success(self.request, f'{self.verbose_name.capitalize()} updated successfully.')
        return redirect(self.get_list_url())
