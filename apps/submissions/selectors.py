from apps.applications.selectors import owned_project
from apps.cores.workflow import require_user

from .models import Submission


class SubmissionSelector:
    """Read-only submission queries, row-level scoped to the caller."""

    @staticmethod
    def for_project(user, project_id):
        project = owned_project(user, project_id)
        return (
            Submission.objects
            .select_related("freelancer", "application", "project")
            .filter(project=project)
            .order_by("-created_at")
        )

    @staticmethod
    def for_company(user):
        require_user(user)
        return (
            Submission.objects
            .select_related("freelancer", "application", "project")
            .filter(project__company=user)
            .order_by("-created_at")
        )

    @staticmethod
    def for_freelancer(user):
        require_user(user)
        return (
            Submission.objects
            .select_related("project", "application")
            .filter(freelancer=user)
            .order_by("-created_at")
        )
