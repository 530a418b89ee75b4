import apps.billing.models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("submissions", "0001_initial"),
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ProjectSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("participation_compensation", models.DecimalField(decimal_places=2, default=apps.billing.models.default_participation_compensation, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0"))])),
                ("winner_compensation", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal("0"))])),
                ("auto_approve_participation", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("project", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="compensation_settings", to="users.project")),
            ],
            options={
                "db_table": "project_settings",
                "verbose_name_plural": "project settings",
            },
        ),
        migrations.CreateModel(
            name="Compensation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("version", models.PositiveIntegerField(default=1)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("type", models.CharField(choices=[("winner", "Winner"), ("participation", "Participation")], max_length=20)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("paid", "Paid")], default="pending", max_length=20)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("approved_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="approved_compensations", to=settings.AUTH_USER_MODEL)),
                ("freelancer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="compensations", to=settings.AUTH_USER_MODEL)),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="compensations", to="users.project")),
                ("submission", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="compensation", to="submissions.submission")),
            ],
            options={
                "db_table": "compensations",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["project", "status"], name="compensations_project_idx"),
                    models.Index(fields=["freelancer", "status"], name="compensations_freelancer_idx"),
                ],
            },
        ),
    ]
