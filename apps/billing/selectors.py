from decimal import Decimal

from django.db.models import Count, Q, Sum

from apps.applications.selectors import owned_project
from apps.cores.workflow import require_user

from .models import Compensation


class CompensationAccessSelector:
    """
    Centralized read-access logic for compensation rows (row-level access).
    """
    @staticmethod
    def for_project(user, project_id):
        project = owned_project(user, project_id)
        return (
            Compensation.objects
            .select_related("submission", "freelancer", "project")
            .filter(project=project)
            .order_by("-created_at")
        )

    @staticmethod
    def for_company(user):
        require_user(user)
        return (
            Compensation.objects
            .select_related("submission", "freelancer", "project")
            .filter(project__company=user)
            .order_by("-created_at")
        )

    @staticmethod
    def for_user(user):
        require_user(user)
        return (
            Compensation.objects
            .select_related("submission", "project")
            .filter(freelancer=user)
            .order_by("-created_at")
        )


def _status_totals(qs):
    totals = qs.aggregate(
        count=Count("id"),
        total=Sum("amount"),
        pending=Sum("amount", filter=Q(status=Compensation.PENDING)),
        approved=Sum("amount", filter=Q(status=Compensation.APPROVED)),
        paid=Sum("amount", filter=Q(status=Compensation.PAID)),
    )
    return {
        key: (value if value is not None else Decimal("0.00"))
        for key, value in totals.items()
    }


class EarningsSelector:
    """
    Aggregations for developers (NOT access control).
    """
    @staticmethod
    def freelancer_summary(user):
        totals = _status_totals(CompensationAccessSelector.for_user(user))
        return {
            "compensation_count": totals["count"],
            "total": totals["total"],
            # Money the developer can count on
            "earned": totals["approved"] + totals["paid"],
            "paid": totals["paid"],
            "pending": totals["pending"],
        }


class CompanyCompensationSelector:
    """
    Aggregations across every project a company owns.
    """
    @staticmethod
    def summary(user):
        totals = _status_totals(CompensationAccessSelector.for_company(user))
        return {
            "compensation_count": totals["count"],
            "total": totals["total"],
            "pending": totals["pending"],
            "approved": totals["approved"],
            "paid": totals["paid"],
        }
