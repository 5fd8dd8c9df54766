import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

User = get_user_model()


class Command(BaseCommand):
    help = 'Create (or promote) the super admin account used to manage panel users'

    def add_arguments(self, parser):
        parser.add_argument('--username', default=os.environ.get('SUPERADMIN_USERNAME', 'admin'))
        parser.add_argument('--password', default=os.environ.get('SUPERADMIN_PASSWORD'))
        parser.add_argument('--name', default='Super Admin')

    def handle(self, *args, **options):
        username = options['username']
        password = options['password']

        user = User.objects.filter(username=username).first()
        if user:
            user.role = User.ROLE_SUPERADMIN
            user.is_staff = True
            user.is_superuser = True
            if password:
                user.set_password(password)
            user.save()
            self.stdout.write(self.style.WARNING(f'User "{username}" already exists, promoted to super admin'))
            return

        if not password:
            raise CommandError('A password is required (--password or SUPERADMIN_PASSWORD)')
        if len(password) < 6:
            raise CommandError('Password must be at least 6 characters')

        User.objects.create_user(
            username=username,
            password=password,
            name=options['name'],
            role=User.ROLE_SUPERADMIN,
            is_staff=True,
            is_superuser=True,
        )
        self.stdout.write(self.style.SUCCESS(f'Super admin "{username}" created'))
