from django.core.management.base import BaseCommand, CommandError

from grocery.auth import normalize_email, register_user
from grocery.models import User


class Command(BaseCommand):
    help = 'Create an admin account, or grant admin rights to an existing one'

    def add_arguments(self, parser):
        parser.add_argument('email')
        parser.add_argument('--password', help='Required when the account does not exist yet')

    def handle(self, *args, **options):
        email = normalize_email(options['email'])
        user = User.objects(email=email).first()
        if user:
            user.is_admin = True
            user.save()
            self.stdout.write(self.style.SUCCESS(f'{email} is now an admin'))
            return
        password = options.get('password')
        if not password or len(password) < 6:
            raise CommandError('A password of at least 6 characters is required for a new admin')
        register_user(email, password, is_admin=True)
        self.stdout.write(self.style.SUCCESS(f'Created admin {email}'))
