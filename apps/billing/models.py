from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.cores.workflow import StatusWorkflowModel


def default_participation_compensation():
    return Decimal(str(settings.TALENTHUB["DEFAULT_PARTICIPATION_COMPENSATION"]))


class ProjectSettings(models.Model):
    project = models.OneToOneField(
        "users.Project",
        on_delete=models.CASCADE,
        related_name="compensation_settings",
    )

    participation_compensation = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=default_participation_compensation,
        validators=[MinValueValidator(Decimal("0"))],
    )
    winner_compensation = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    auto_approve_participation = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "project_settings"
        verbose_name_plural = "project settings"

    @property
    def winner_amount(self):
        return self.winner_compensation or Decimal("0.00")

    def __str__(self):
        return f"Settings for project #{self.project_id}"


class Compensation(StatusWorkflowModel):
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"

    STATUS_CHOICES = (
        (PENDING, "Pending"),
        (APPROVED, "Approved"),
        (PAID, "Paid"),
    )

    WINNER = "winner"
    PARTICIPATION = "participation"

    TYPE_CHOICES = (
        (WINNER, "Winner"),
        (PARTICIPATION, "Participation"),
    )

    # Forward only; winners are created directly as approved
    TRANSITIONS = {
        PENDING: {APPROVED},
        APPROVED: {PAID},
        PAID: set(),
    }

    submission = models.OneToOneField(
        "submissions.Submission",
        on_delete=models.PROTECT,
        related_name="compensation",
    )

    freelancer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="compensations",
    )

    project = models.ForeignKey(
        "users.Project",
        on_delete=models.PROTECT,
        related_name="compensations",
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING,
    )

    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="approved_compensations",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "compensations"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["project", "status"], name="compensations_project_idx"),
            models.Index(fields=["freelancer", "status"], name="compensations_freelancer_idx"),
        ]

    def __str__(self):
        return f"Compensation #{self.id} → {self.freelancer_id} ({self.type}, {self.status})"
