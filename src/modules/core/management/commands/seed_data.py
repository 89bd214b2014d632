from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


class Command(BaseCommand):
    help = "Seed database with development users, catalog and random orders."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=50,
            help="Number of random orders to generate (default: 50).",
        )
        parser.add_argument("--seed", type=int, default=42, help="Random seed.")

    def handle(self, *args, **options):
        rng = random.Random(options["seed"])
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        customers = self._seed_customers()
        products = self._seed_products(rng)
        report = self._seed_orders(options["orders"], rng)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={report.created_count}, "
                f"failed={report.failed_count}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_user(
                "admin", email="admin@local", password="Admin123!", is_staff=True
            )
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", email="user@local", password="User123!")
            created += 1
        return created

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        customers: list[Customer] = []
        seed_customers = [
            ("Ada", "Lovelace", "ada@example.com"),
            ("Alan", "Turing", "alan@example.com"),
            ("Grace", "Hopper", "grace@example.com"),
            ("Edsger", "Dijkstra", "edsger@example.com"),
            ("Barbara", "Liskov", "barbara@example.com"),
            ("Donald", "Knuth", "donald@example.com"),
            ("Margaret", "Hamilton", "margaret@example.com"),
            ("Ken", "Thompson", "ken@example.com"),
        ]
        for first_name, last_name, email in seed_customers:
            customer, _ = Customer.objects.get_or_create(
                email=email,
                defaults={"first_name": first_name, "last_name": last_name},
            )
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_products(self, rng: random.Random) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("ELEC-0001", "Wireless Mouse", Decimal("24.90")),
            ("ELEC-0002", "Mechanical Keyboard", Decimal("89.00")),
            ("ELEC-0003", "27in Monitor", Decimal("249.99")),
            ("HOME-0001", "Desk Lamp", Decimal("19.50")),
            ("HOME-0002", "Office Chair", Decimal("159.00")),
            ("BOOK-0001", "Algorithms Handbook", Decimal("45.00")),
            ("SPRT-0001", "Water Bottle", Decimal("12.00")),
            ("FOOD-0001", "Coffee Beans 1kg", Decimal("17.80")),
            ("TOYS-0001", "Puzzle 1000pcs", Decimal("21.40")),
            ("CLTH-0001", "Rain Jacket", Decimal("74.90")),
        ]
        for sku, name, price in catalog:
            product, _ = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "price": price,
                    "stock_quantity": rng.randint(10, 200),
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, count: int, rng: random.Random):
        self.stdout.write("Creating orders...")
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        report = service.generate_random_orders(max(count, 0), rng=rng)
        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return report
