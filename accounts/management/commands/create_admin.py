"""
Management command to create (or reset) an admin login.

Usage:
    python manage.py create_admin --email admin@example.com --password secret
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User


class Command(BaseCommand):
    help = 'Creates an admin user, or resets the password of an existing one'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True)
        parser.add_argument('--password', required=True)
        parser.add_argument('--name', default='Administrator')

    def handle(self, *args, **options):
        email = options['email'].strip().lower()
        if not email:
            raise CommandError('Email is required')

        with transaction.atomic():
            user = User.objects.filter(email=email).first()
            if user:
                self.stdout.write(self.style.WARNING(f'User with email {email} already exists.'))
            else:
                user = User(email=email, username=email)

            user.name = options['name']
            user.role = User.UserRole.ADMIN
            user.is_active = True
            user.is_staff = True
            user.is_superuser = True
            user.set_password(options['password'])
            user.save()

        self.stdout.write(self.style.SUCCESS(f'Admin ready: {email}'))
