from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from apps.cores.workflow import StatusWorkflowModel


class Submission(StatusWorkflowModel):
    SUBMITTED = "submitted"
    SELECTED = "selected"
    REJECTED = "rejected"

    STATUS_CHOICES = (
        (SUBMITTED, "Submitted"),
        (SELECTED, "Selected"),
        (REJECTED, "Rejected"),
    )

    TRANSITIONS = {
        SUBMITTED: {SELECTED, REJECTED},
        SELECTED: set(),
        REJECTED: set(),
    }

    LINK_TYPES = ("figma", "drive", "github", "behance", "other")

    # One submission per application
    application = models.OneToOneField(
        "applications.Application",
        on_delete=models.CASCADE,
        related_name="submission",
    )

    freelancer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="submissions",
    )

    project = models.ForeignKey(
        "users.Project",
        on_delete=models.CASCADE,
        related_name="submissions",
    )

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    # Ordered [{"type": "figma", "label": "...", "url": "https://..."}]
    links = models.JSONField(default=list, blank=True)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=SUBMITTED,
    )

    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    feedback = models.TextField(blank=True)

    deadline = models.DateTimeField(null=True, blank=True)
    submitted_at = models.DateTimeField(default=timezone.now)

    # Read model of the related Compensation, written in the same
    # transaction as the compensation row itself.
    compensation_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    compensation_type = models.CharField(max_length=20, blank=True)
    compensation_status = models.CharField(max_length=20, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "submissions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["project", "status"], name="submissions_project_status_idx"),
            models.Index(fields=["freelancer"], name="submissions_freelancer_idx"),
        ]

    def __str__(self):
        return f"Submission #{self.id} | {self.title} ({self.status})"

    @property
    def deadline_passed(self):
        return self.deadline is not None and self.deadline < timezone.now()
