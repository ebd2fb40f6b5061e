import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Experience",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("cultural", "Cultural"),
                            ("artistic", "Artistic"),
                            ("sports", "Sports"),
                            ("nature", "Nature"),
                            ("food", "Food"),
                            ("technology", "Technology"),
                            ("business", "Business"),
                            ("educational", "Educational"),
                            ("religious", "Religious"),
                            ("recreational", "Recreational"),
                        ],
                        max_length=20,
                    ),
                ),
                ("description", models.TextField(max_length=2000)),
                ("steps", models.JSONField(default=list, help_text="Ordered list of step descriptions.")),
                ("date_time", models.DateTimeField()),
                (
                    "duration",
                    models.PositiveSmallIntegerField(
                        help_text="Duration in hours.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "capacity",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(50),
                        ]
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("address", models.CharField(max_length=255)),
                ("images", models.JSONField(blank=True, default=list)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "rating",
                    models.FloatField(
                        default=0,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("reviews_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "guide",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="experiences",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Experience",
                "verbose_name_plural": "Experiences",
                "ordering": ["date_time"],
                "indexes": [
                    models.Index(fields=["guide", "date_time"], name="exp_guide_datetime_idx"),
                    models.Index(fields=["category", "is_active"], name="exp_category_active_idx"),
                    models.Index(fields=["date_time", "is_active"], name="exp_datetime_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("capacity__gte", 1), ("capacity__lte", 50)),
                        name="experience_capacity_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)),
                        name="experience_price_non_negative",
                    ),
                ],
            },
        ),
    ]
