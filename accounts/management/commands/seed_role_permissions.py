"""
Management command to load the default role permissions.

Usage:
    python manage.py seed_role_permissions
    python manage.py seed_role_permissions --reset
"""

from django.core.management.base import BaseCommand

from accounts.services import permissions_by_role, seed_role_permissions


class Command(BaseCommand):
    help = 'Load the default permission set of every role into the database'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Drop existing rows of each seeded role before loading the defaults',
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.MIGRATE_HEADING('Seeding role permissions...'))

        created = seed_role_permissions(reset=options['reset'])

        self.stdout.write(self.style.SUCCESS(f'Created {created} role permission rows'))
        for role, permissions in permissions_by_role().items():
            self.stdout.write(
                self.style.MIGRATE_LABEL(f'   - {role}: {", ".join(permissions) or "(none)"}')
            )
