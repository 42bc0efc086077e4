from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock, ProductUnavailable
from modules.orders.views import build_order_service
from modules.products.dtos import CreateProductDTO
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

CATALOG = [
    ('Monitor 27"', "Electronics", Decimal("1299.90")),
    ("Mechanical Keyboard", "Electronics", Decimal("399.90")),
    ("Gaming Mouse", "Electronics", Decimal("249.90")),
    ('Notebook 14"', "Electronics", Decimal("3999.00")),
    ("Headset", "Electronics", Decimal("299.90")),
    ("Office Desk", "Furniture", Decimal("899.00")),
    ("Ergonomic Chair", "Furniture", Decimal("1499.00")),
    ("Bookshelf", "Furniture", Decimal("699.00")),
    ("A4 Paper", "Office", Decimal("29.90")),
    ("Blue Pen", "Office", Decimal("4.90")),
    ("Notebook", "Office", Decimal("19.90")),
    ("Stapler", "Office", Decimal("39.90")),
]

# Where seeded orders end up after creation.
STATUS_PATHS = [
    ([], 0.25),
    ([OrderStatus.CONFIRMED], 0.25),
    ([OrderStatus.CONFIRMED, OrderStatus.SHIPPED], 0.15),
    ([OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED], 0.20),
    ([OrderStatus.CANCELLED], 0.15),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=30)
        parser.add_argument("--seed", type=int, default=42)

    def handle(self, *args, **options):
        random.seed(options["seed"])
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        products = self._seed_products()
        orders_created = self._seed_orders(users, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> list:
        User = get_user_model()
        users = []
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
        for username in ("alice", "bob", "carol"):
            user, created = User.objects.get_or_create(username=username)
            if created:
                user.set_password(f"{username}123")
                user.save()
            users.append(user)
        return users

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        service = ProductService(repository=ProductDjangoRepository())
        products: list[Product] = []
        for name, category, price in CATALOG:
            product = Product.objects.filter(name=name).first()
            if product is None:
                product = service.create_product(
                    CreateProductDTO(
                        name=name,
                        description=category,
                        price=price,
                        stock=random.randint(10, 200),
                    )
                )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, users: list, products: list[Product], count: int) -> int:
        self.stdout.write("Creating orders...")
        if not users or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no users/products)."))
            return 0

        service = build_order_service()
        paths = [p for p, _ in STATUS_PATHS]
        weights = [w for _, w in STATUS_PATHS]
        created = 0

        for i in range(count):
            picked = random.sample(products, k=min(random.randint(1, 4), len(products)))
            dto = CreateOrderDTO(
                user_id=random.choice(users).pk,
                items=[
                    CreateOrderItemDTO(product_id=p.id, quantity=random.randint(1, 3))
                    for p in picked
                ],
                notes=f"Seed order {i + 1}",
            )
            try:
                order = service.create_order(dto)
            except (InsufficientStock, ProductUnavailable) as exc:
                self.stdout.write(self.style.WARNING(f"Skipped order {i + 1}: {exc}"))
                continue

            for status in random.choices(paths, weights=weights, k=1)[0]:
                order = service.update_status(order.id, status, notes="Seed")
            created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created
