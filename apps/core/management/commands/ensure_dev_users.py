# PATH: apps/core/management/commands/ensure_dev_users.py
"""
로컬 개발용 계정 채우기 (role 별 1명씩).

- admin / instructor / student 유저 없으면 생성
- 있으면 비밀번호·role 만 맞춤

사용:
  python manage.py ensure_dev_users --password=devpass123
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction


DEV_USERS = (
    ("admin", "admin", "관리자"),
    ("instructor", "instructor", "강사"),
    ("student", "student", "학습자"),
)


class Command(BaseCommand):
    help = "Ensure one dev user per role (admin / instructor / student)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="devpass123",
            help="Password for all dev users (default: devpass123)",
        )
        parser.add_argument(
            "--prefix",
            type=str,
            default="dev-",
            help="Username prefix (default: dev-)",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        User = get_user_model()
        password = options["password"]
        prefix = options["prefix"] or ""

        for suffix, role, name in DEV_USERS:
            username = f"{prefix}{suffix}"
            user, created = User.objects.get_or_create(
                username=username,
                defaults={"name": name, "role": role, "is_active": True},
            )
            user.role = role
            user.is_staff = role == "admin"
            user.set_password(password)
            user.save()
            self.stdout.write(
                self.style.SUCCESS(f"{'created' if created else 'updated'}: {username} (role={role})")
            )
