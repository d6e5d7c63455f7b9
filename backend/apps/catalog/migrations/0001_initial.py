from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Plan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(help_text="Display name, e.g. 'Growth'", max_length=255)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Price per period in major currency units, e.g. 349.00",
                        max_digits=12,
                    ),
                ),
                (
                    "seat_limit",
                    models.PositiveIntegerField(
                        default=1, help_text="Number of seats an organization on this plan may use"
                    ),
                ),
                ("is_active", models.BooleanField(default=True, help_text="Inactive plans cannot be purchased")),
            ],
            options={
                "ordering": ["price", "id"],
            },
        ),
    ]
