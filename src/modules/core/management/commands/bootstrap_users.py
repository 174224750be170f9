from __future__ import annotations

import structlog
from decouple import config

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

logger = structlog.get_logger(__name__)


class Command(BaseCommand):
    help = (
        "Idempotently create the admin account and the two test accounts. "
        "Meant to be run once by the host at startup."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--skip-test-users",
            action="store_true",
            help="Only ensure the admin account exists.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        created = self._ensure_admin()
        if not options["skip_test_users"]:
            created += self._ensure_test_users()

        logger.info("bootstrap.completed", users_created=created)
        self.stdout.write(self.style.SUCCESS(f"Bootstrap completed: users={created}"))

    def _ensure_admin(self) -> int:
        User = get_user_model()
        if User.objects.filter(username="admin").exists():
            self.stdout.write("Admin user already exists")
            return 0
        User.objects.create_superuser(
            "admin",
            email="admin@example.com",
            password=config("BOOTSTRAP_ADMIN_PASSWORD", default="admin123"),
        )
        logger.info("bootstrap.user_created", username="admin")
        return 1

    def _ensure_test_users(self) -> int:
        User = get_user_model()
        password = config("BOOTSTRAP_USER_PASSWORD", default="password123")
        created = 0
        for username in ("user1", "user2"):
            if User.objects.filter(username=username).exists():
                continue
            User.objects.create_user(
                username,
                email=f"{username}@example.com",
                password=password,
            )
            logger.info("bootstrap.user_created", username=username)
            created += 1
        return created
