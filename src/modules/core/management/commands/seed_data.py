from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.products.models import Product

SEED_USERS = [
    ("admin", "admin123", {"is_staff": True, "is_superuser": True}),
    ("alice", "alice123", {}),
    ("bob", "bob123", {}),
]

CATALOG = [
    ("A plasma TV", Decimal("100.00")),
    ("LCD TV", Decimal("399.90")),
    ("Fastest Laptop", Decimal("1299.00")),
    ("CD player", Decimal("49.90")),
    ("Videogame console", Decimal("299.00")),
    ("MP3 player", Decimal("59.90")),
    ("Mechanical keyboard", Decimal("89.90")),
    ("Wireless mouse", Decimal("24.90")),
    ("Noise cancelling headphones", Decimal("199.00")),
    ("4K monitor", Decimal("449.00")),
    ("USB-C hub", Decimal("34.90")),
    ("Smart watch", Decimal("149.00")),
]


class Command(BaseCommand):
    help = "Seed database with demo users and products."

    def add_arguments(self, parser):
        parser.add_argument(
            "--seed",
            type=int,
            default=42,
            help="Random seed for product ownership and publication.",
        )

    def handle(self, *args, **options):
        random.seed(options["seed"])
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        products_created = self._seed_products(users)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"products_created={products_created}"
            )
        )

    def _seed_users(self) -> list:
        User = get_user_model()
        users = []
        for username, password, extra in SEED_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(
                    username,
                    email=f"{username}@example.com",
                    password=password,
                    **extra,
                )
            users.append(user)
        return users

    def _seed_products(self, users: list) -> int:
        self.stdout.write("Creating products...")
        owners = [user for user in users if not user.is_superuser] or users
        created = 0
        for title, price in CATALOG:
            _, was_created = Product.objects.get_or_create(
                title=title,
                defaults={
                    "price": price,
                    "published": random.random() < 0.75,
                    "user": random.choice(owners),
                },
            )
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return created
