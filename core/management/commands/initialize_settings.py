# core/management/commands/initialize_settings.py
from django.core.management.base import BaseCommand

from core.models import SystemSetting
from reports.filters import DEFAULT_RANGE

DEFAULT_SETTINGS = {
    'clinic_name': ('Clinic Dashboard', 'Name shown in the header and on exported reports'),
    'reports_default_range': (DEFAULT_RANGE, 'Date range used when no filter is chosen'),
}


class Command(BaseCommand):
    help = 'Seed the runtime settings read by the dashboard and reports'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Overwrite existing values with the defaults',
        )

    def handle(self, *args, **options):
        reset = options['reset']
        written = []

        for key, (value, description) in DEFAULT_SETTINGS.items():
            exists = SystemSetting.objects.filter(key=key).exists()
            if exists and not reset:
                if options.get('verbosity', 1) >= 2:
                    self.stdout.write(f'  {key} kept as "{SystemSetting.get_setting(key)}"')
                continue
            SystemSetting.set_setting(key, value, description)
            written.append(key)
            self.stdout.write(self.style.SUCCESS(f'✓ {key} = "{value}"'))

        if written:
            self.stdout.write(self.style.SUCCESS(f'✓ {len(written)} setting(s) written'))
        else:
            self.stdout.write(self.style.SUCCESS('✓ Settings already initialized'))
