import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("applications", "0001_initial"),
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("version", models.PositiveIntegerField(default=1)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("links", models.JSONField(blank=True, default=list)),
                ("status", models.CharField(choices=[("submitted", "Submitted"), ("selected", "Selected"), ("rejected", "Rejected")], default="submitted", max_length=20)),
                ("rating", models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ("feedback", models.TextField(blank=True)),
                ("deadline", models.DateTimeField(blank=True, null=True)),
                ("submitted_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("compensation_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("compensation_type", models.CharField(blank=True, max_length=20)),
                ("compensation_status", models.CharField(blank=True, max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("application", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="submission", to="applications.application")),
                ("freelancer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="submissions", to=settings.AUTH_USER_MODEL)),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="submissions", to="users.project")),
            ],
            options={
                "db_table": "submissions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["project", "status"], name="submissions_project_status_idx"),
                    models.Index(fields=["freelancer"], name="submissions_freelancer_idx"),
                ],
            },
        ),
    ]
