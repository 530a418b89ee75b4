from apps.cores.exceptions import NotFound, Unauthorized
from apps.cores.workflow import require_user
from apps.users.models import Project

from .models import Application


def owned_project(user, project_id):
    """Project lookup scoped to the calling company."""
    require_user(user)
    project = Project.objects.filter(pk=project_id).first()
    if project is None:
        raise NotFound("Project not found")
    if project.company_id != user.id:
        raise Unauthorized()
    return project


class ApplicationSelector:
    """Read-only application queries, row-level scoped to the caller."""

    @staticmethod
    def for_project(user, project_id):
        project = owned_project(user, project_id)
        return (
            Application.objects
            .select_related("project", "freelancer")
            .filter(project=project)
            .order_by("-created_at")
        )

    @staticmethod
    def for_freelancer(user):
        require_user(user)
        return (
            Application.objects
            .select_related("project", "project__company")
            .filter(freelancer=user)
            .order_by("-created_at")
        )

    @staticmethod
    def for_company(user):
        require_user(user)
        return (
            Application.objects
            .select_related("project", "freelancer")
            .filter(project__company=user)
            .order_by("-created_at")
        )
