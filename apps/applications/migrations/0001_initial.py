import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Application",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("version", models.PositiveIntegerField(default=1)),
                ("proposal", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("submitted", "Submitted"), ("shortlisted", "Shortlisted"), ("rejected", "Rejected"), ("awarded", "Awarded")], default="submitted", max_length=20)),
                ("submission_deadline", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("freelancer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to=settings.AUTH_USER_MODEL)),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to="users.project")),
            ],
            options={
                "db_table": "applications",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["project", "status"], name="applications_proj_status_idx")],
                "unique_together": {("project", "freelancer")},
            },
        ),
    ]
