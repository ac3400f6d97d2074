# vendors/management/commands/seed_vendors.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_CUSTOMER, ROLE_VENDOR
from vendors.models import Vendor


@dataclass(frozen=True)
class SeedVendorSpec:
    email: str
    name: str
    description: str
    # Offsets (degrees) from the --lat/--lng center.
    d_lat: float
    d_lng: float
    online: bool


VENDOR_SPECS = [
    SeedVendorSpec("bakso@example.com", "Bakso Pak Min", "Meatball soup cart", 0.002, 0.001, True),
    SeedVendorSpec("sate@example.com", "Sate Madura", "Chicken satay", -0.004, 0.003, True),
    SeedVendorSpec("es@example.com", "Es Doger", "Iced coconut dessert", 0.010, -0.008, False),
    SeedVendorSpec("kopi@example.com", "Kopi Keliling", "Coffee bicycle", 0.030, 0.025, True),
]

CUSTOMER_EMAIL = "customer@example.com"


class Command(BaseCommand):
    help = "Seed demo vendors around a map center (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--lat", type=float, default=-6.2000, help="Center latitude")
        parser.add_argument("--lng", type=float, default=106.8166, help="Center longitude")
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded accounts (default: Pass1234!)",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        lat = options["lat"]
        lng = options["lng"]
        password = options.get("password") or ""

        if not -90 <= lat <= 90 or not -180 <= lng <= 180:
            raise CommandError("--lat/--lng out of range.")

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()
        created_count = 0

        for spec in VENDOR_SPECS:
            user, user_created = User.objects.get_or_create(
                email=spec.email,
                defaults={"role": ROLE_VENDOR, "full_name": spec.name},
            )
            if user_created:
                user.set_password(password)
                user.save(update_fields=["password"])

            vendor, created = Vendor.objects.update_or_create(
                user=user,
                defaults={
                    "name": spec.name,
                    "description": spec.description,
                    "latitude": lat + spec.d_lat,
                    "longitude": lng + spec.d_lng,
                    "online": spec.online,
                },
            )
            if created:
                created_count += 1
                self.stdout.write(f"created: {vendor.name} -> {spec.email}")
            else:
                self.stdout.write(f"exists:  {vendor.name} -> {spec.email}")

        customer, customer_created = User.objects.get_or_create(
            email=CUSTOMER_EMAIL,
            defaults={"role": ROLE_CUSTOMER, "full_name": "Demo Customer"},
        )
        if customer_created:
            customer.set_password(password)
            customer.save(update_fields=["password"])

        self.stdout.write("\n--- Summary ---")
        self.stdout.write(f"Vendors created: {created_count}")
        self.stdout.write(f"Customer: {CUSTOMER_EMAIL}")
        self.stdout.write("\nRun example:")
        self.stdout.write("  python manage.py seed_vendors --lat -6.2 --lng 106.8166")
