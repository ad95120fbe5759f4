# core/management/commands/setup_initial_data.py
import secrets

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction

from users.models import Role

User = get_user_model()

ROLE_DESCRIPTIONS = {
    Role.ADMIN: 'Full access to every clinic, including clinics and procedures',
    Role.CLINIC_STAFF: 'Manages patients, appointments, expenses and campaigns',
    Role.READ_ONLY: 'Can browse screens and reports but never save',
}


class Command(BaseCommand):
    help = 'Set up roles, the admin user and default settings'

    def add_arguments(self, parser):
        parser.add_argument('--admin-username', default='admin')
        parser.add_argument('--admin-email', default='admin@example.com')
        parser.add_argument(
            '--admin-password',
            help='Password for the admin user; a random one is generated and printed when omitted',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('Setting up initial data...'))

        self.create_default_roles()
        self.create_admin_user(options)
        call_command('initialize_settings', verbosity=options.get('verbosity', 1), stdout=self.stdout)

        self.stdout.write(self.style.SUCCESS('Initial data setup completed!'))

    def create_default_roles(self):
        """Create the admin, clinic staff and read-only roles"""
        self.stdout.write('Creating default roles...')

        for name, display_name in Role.ROLE_CHOICES:
            role, created = Role.objects.get_or_create(
                name=name,
                defaults={
                    'display_name': display_name,
                    'description': ROLE_DESCRIPTIONS[name],
                }
            )
            if created:
                self.stdout.write(f'  ✓ Created role: {role.display_name}')
            else:
                self.stdout.write(f'  - Role already exists: {role.display_name}')

    def create_admin_user(self, options):
        """Create default admin user"""
        self.stdout.write('Creating admin user...')

        username = options['admin_username']
        if User.objects.filter(username=username).exists():
            self.stdout.write('  - Admin user already exists')
            return

        password = options.get('admin_password') or secrets.token_urlsafe(12)
        admin_user = User.objects.create_superuser(
            username=username,
            email=options['admin_email'],
            password=password,
            first_name='System',
            last_name='Administrator',
            role=Role.objects.get(name=Role.ADMIN),
        )
        self.stdout.write(f'  ✓ Created admin user: {admin_user.username}')
        if not options.get('admin_password'):
            self.stdout.write(f'    Password: {password}')
            self.stdout.write('    Please change this password after first login!')
