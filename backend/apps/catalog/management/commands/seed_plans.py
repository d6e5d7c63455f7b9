"""
Management command to seed the price catalog.

Run once per environment to create the plans checkout sells.
Usage: python manage.py seed_plans
       python manage.py seed_plans --plan "Team:349.00:10" --plan "Solo:49.90:1"
"""

from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError

from apps.catalog.models import Plan

DEFAULT_PLANS = [
    ("Starter", Decimal("49.90"), 1),
    ("Team", Decimal("349.00"), 10),
    ("Business", Decimal("999.00"), 50),
]


def parse_plan(value: str) -> tuple[str, Decimal, int]:
    """Parse "name:price:seats" into its parts."""
    try:
        name, price, seats = value.rsplit(":", 2)
        parsed = (name.strip(), Decimal(price), int(seats))
    except (ValueError, InvalidOperation) as e:
        raise CommandError(f"Invalid plan '{value}', expected name:price:seats") from e

    if not parsed[0] or parsed[1] < 0 or parsed[2] < 1:
        raise CommandError(f"Invalid plan '{value}', expected name:price:seats")
    return parsed


class Command(BaseCommand):
    help = "Create or update plans in the price catalog"

    def add_arguments(self, parser):
        parser.add_argument(
            "--plan",
            action="append",
            dest="plans",
            metavar="NAME:PRICE:SEATS",
            help="Plan to seed (repeatable). Defaults to the built-in plan set.",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite price and seat limit of plans that already exist",
        )

    def handle(self, *args, **options):
        plans = [parse_plan(p) for p in options["plans"]] if options["plans"] else DEFAULT_PLANS

        for name, price, seat_limit in plans:
            plan, created = Plan.objects.get_or_create(
                name=name, defaults={"price": price, "seat_limit": seat_limit}
            )
            if created:
                self.stdout.write(f"Created plan {plan.id}: {name} ({price}, {seat_limit} seats)")
            elif options["force"]:
                plan.price = price
                plan.seat_limit = seat_limit
                plan.is_active = True
                plan.save(update_fields=["price", "seat_limit", "is_active", "updated_at"])
                self.stdout.write(f"Updated plan {plan.id}: {name} ({price}, {seat_limit} seats)")
            else:
                self.stdout.write(self.style.WARNING(f"Plan already exists: {plan.id} {name}"))

        self.stdout.write(self.style.SUCCESS(f"\nCatalog seeded with {len(plans)} plan(s)."))
        self.stdout.write(
            self.style.NOTICE(
                "\nDon't forget to set up your webhook endpoint:\n"
                "   Stripe Dashboard > Developers > Webhooks\n"
                "   URL: https://your-domain.com/webhooks/stripe/\n"
                "   Events: payment_intent.succeeded\n"
            )
        )
