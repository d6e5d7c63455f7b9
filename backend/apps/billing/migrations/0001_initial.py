from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SubscriptionLedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "source_event_id",
                    models.CharField(
                        help_text="Stripe event ID that confirmed this payment, e.g. 'evt_xxx'",
                        max_length=255,
                        unique=True,
                    ),
                ),
                (
                    "payment_intent_id",
                    models.CharField(
                        blank=True, db_index=True, help_text="Stripe PaymentIntent ID, e.g. 'pi_xxx'", max_length=255
                    ),
                ),
                (
                    "owner_user_id",
                    models.CharField(db_index=True, help_text="Internal id of the paying user", max_length=255),
                ),
                ("plan_id", models.PositiveBigIntegerField(help_text="Catalog plan paid for")),
                (
                    "organization_id",
                    models.PositiveBigIntegerField(
                        blank=True,
                        db_index=True,
                        help_text="Organization entitled by this payment, if one was resolved",
                        null=True,
                    ),
                ),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2, help_text="Amount received, in major currency units", max_digits=12
                    ),
                ),
                ("currency", models.CharField(default="brl", max_length=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-start_date", "-id"],
                "verbose_name_plural": "subscription ledger entries",
            },
        ),
    ]
