import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.applications.selectors import owned_project
from apps.cores.exceptions import NotFound, Unauthorized, ValidationFailed
from apps.cores.workflow import check_versions, require_user
from apps.submissions.models import Submission

from .models import Compensation, ProjectSettings

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = ("participation_compensation", "winner_compensation", "auto_approve_participation")


def settings_for(project, lock=False):
    """Return the project's compensation settings, creating defaults on first use."""
    queryset = ProjectSettings.objects.select_for_update() if lock else ProjectSettings.objects
    project_settings, created = queryset.get_or_create(project=project)
    if created:
        logger.info("Created default compensation settings for project %s", project.id)
    return project_settings


def get_project_settings(user, project_id):
    project = owned_project(user, project_id)
    with transaction.atomic():
        return settings_for(project)


def update_project_settings(user, project_id, **changes):
    project = owned_project(user, project_id)

    unknown = set(changes) - set(SETTINGS_FIELDS)
    if unknown:
        raise ValidationFailed(f"Unknown settings: {', '.join(sorted(unknown))}")

    for field in ("participation_compensation", "winner_compensation"):
        value = changes.get(field)
        if value is not None and value < 0:
            raise ValidationFailed("Compensation amounts cannot be negative.")

    with transaction.atomic():
        project_settings = settings_for(project, lock=True)
        for field, value in changes.items():
            setattr(project_settings, field, value)
        project_settings.save()

    logger.info("Company %s updated compensation settings for project %s", user.id, project.id)
    return project_settings


def _mirror_on_submissions(submission_ids, now, **fields):
    """Keep the denormalized Submission.compensation_* fields in step."""
    return Submission.objects.filter(pk__in=submission_ids).update(
        version=F("version") + 1,
        updated_at=now,
        **fields,
    )


def record_winner_compensation(submission, amount, approved_by, now):
    """Winner rows skip review and start approved. Caller owns the transaction."""
    return Compensation.objects.create(
        submission=submission,
        freelancer_id=submission.freelancer_id,
        project_id=submission.project_id,
        amount=amount,
        type=Compensation.WINNER,
        status=Compensation.APPROVED,
        approved_by=approved_by,
        approved_at=now,
    )


def record_participation_compensations(submissions, amount, now):
    """One pending participation row per losing submission. Caller owns the transaction."""
    return Compensation.objects.bulk_create([
        Compensation(
            submission=submission,
            freelancer_id=submission.freelancer_id,
            project_id=submission.project_id,
            amount=amount,
            type=Compensation.PARTICIPATION,
            status=Compensation.PENDING,
            created_at=now,
        )
        for submission in submissions
    ])


def _locked_compensations(user, compensation_ids):
    ids = sorted({int(pk) for pk in compensation_ids})
    if not ids:
        raise ValidationFailed("No compensations selected.")

    compensations = list(
        Compensation.objects
        .select_for_update()
        .select_related("project")
        .filter(pk__in=ids)
        .order_by("pk")
    )

    missing = set(ids) - {c.pk for c in compensations}
    if missing:
        raise NotFound(f"Compensations not found: {', '.join(map(str, sorted(missing)))}")

    foreign = [c.pk for c in compensations if c.project.company_id != user.id]
    if foreign:
        raise Unauthorized(f"Unauthorized for compensations: {', '.join(map(str, foreign))}")

    return compensations


def _approve(compensations, approved_by, now):
    for compensation in compensations:
        compensation.assert_transition(Compensation.APPROVED)

    for compensation in compensations:
        compensation.apply_update(
            status=Compensation.APPROVED,
            approved_by=approved_by,
            approved_at=now,
        )

    _mirror_on_submissions(
        [c.submission_id for c in compensations],
        now,
        compensation_status=Compensation.APPROVED,
    )
    return compensations


def approve_compensations(user, expected_versions):
    """
    Approve a batch of pending compensations. `expected_versions` maps
    compensation id to the version the caller read.

    All rows are checked (existence, ownership, version, pending status)
    before any write; the compensation rows and their submission mirrors
    are updated in one transaction.
    """
    require_user(user)
    now = timezone.now()

    with transaction.atomic():
        expected_versions = {int(pk): version for pk, version in expected_versions.items()}
        compensations = _locked_compensations(user, expected_versions)
        check_versions(compensations, expected_versions)
        _approve(compensations, user, now)

    logger.info(
        "Company %s approved compensations %s",
        user.id, [c.pk for c in compensations],
    )
    return compensations


def mark_paid(user, compensation_id, expected_version, notes=None):
    require_user(user)
    now = timezone.now()

    with transaction.atomic():
        compensation = _locked_compensations(user, [compensation_id])[0]
        compensation.check_version(expected_version)
        compensation.assert_transition(Compensation.PAID)

        fields = {"status": Compensation.PAID, "paid_at": now}
        if notes:
            fields["notes"] = notes
        compensation.apply_update(**fields)

        _mirror_on_submissions(
            [compensation.submission_id],
            now,
            compensation_status=Compensation.PAID,
        )

    logger.info("Company %s marked compensation %s as paid", user.id, compensation.pk)
    return compensation


def auto_approve_participation():
    """
    Approve pending participation compensations for every project that
    opted into auto-approval, on behalf of the project's company.
    """
    approved = 0
    now = timezone.now()
    opted_in = (
        ProjectSettings.objects
        .filter(auto_approve_participation=True)
        .select_related("project", "project__company")
    )

    for project_settings in opted_in:
        project = project_settings.project
        with transaction.atomic():
            compensations = list(
                Compensation.objects
                .select_for_update()
                .filter(
                    project=project,
                    type=Compensation.PARTICIPATION,
                    status=Compensation.PENDING,
                )
                .order_by("pk")
            )
            if not compensations:
                continue
            _approve(compensations, project.company, now)

        approved += len(compensations)
        logger.info(
            "Auto-approved %d participation compensations for project %s",
            len(compensations), project.id,
        )

    return approved
