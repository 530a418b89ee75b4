from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.cores.workflow import StatusWorkflowModel
from apps.users.models import Project


class Application(StatusWorkflowModel):
    SUBMITTED = "submitted"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    AWARDED = "awarded"

    STATUS_CHOICES = [
        (SUBMITTED, 'Submitted'),
        (SHORTLISTED, 'Shortlisted'),
        (REJECTED, 'Rejected'),
        (AWARDED, 'Awarded'),
    ]

    # Awarded is only reached through winner selection on a submission.
    # Shortlisted -> shortlisted lets the company move the deadline.
    TRANSITIONS = {
        SUBMITTED: {SHORTLISTED, REJECTED},
        SHORTLISTED: {SHORTLISTED, REJECTED, AWARDED},
        REJECTED: set(),
        AWARDED: set(),
    }

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="applications"
    )

    freelancer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="applications"
    )

    proposal = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=SUBMITTED
    )

    # Set when the company shortlists; submissions inherit it
    submission_deadline = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "applications"
        unique_together = ('project', 'freelancer')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=["project", "status"], name="applications_proj_status_idx"),
        ]

    @property
    def deadline_passed(self):
        return (
            self.submission_deadline is not None
            and self.submission_deadline < timezone.now()
        )

    def __str__(self):
        return f"{self.freelancer.email} → {self.project.title}"
