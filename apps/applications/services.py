import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.cores.exceptions import (
    Conflict,
    InvalidState,
    NotFound,
    Unauthorized,
    ValidationFailed,
)
from apps.cores.workflow import check_versions, require_user
from apps.users.models import Project

from .models import Application

logger = logging.getLogger(__name__)


def assert_project_owner(user, project):
    if project.company_id != user.id:
        raise Unauthorized()


def _locked_application(application_id):
    try:
        return (
            Application.objects
            .select_for_update()
            .select_related("project")
            .get(pk=application_id)
        )
    except Application.DoesNotExist:
        raise NotFound("Application not found")


def _locked_applications(user, expected_versions):
    """
    Lock every requested application and verify, row by row, that the
    caller owns its project and that it is still at the version the caller
    read. Any missing, foreign or stale row fails the batch.

    `expected_versions` maps application id to version.
    """
    expected_versions = {int(pk): version for pk, version in expected_versions.items()}
    ids = sorted(expected_versions)
    if not ids:
        raise ValidationFailed("No applications selected.")

    applications = list(
        Application.objects
        .select_for_update()
        .select_related("project")
        .filter(pk__in=ids)
        .order_by("pk")
    )

    missing = set(ids) - {application.pk for application in applications}
    if missing:
        raise NotFound(f"Applications not found: {', '.join(map(str, sorted(missing)))}")

    foreign = [a.pk for a in applications if a.project.company_id != user.id]
    if foreign:
        logger.warning(
            "User %s attempted bulk change on foreign applications %s",
            user.id, foreign,
        )
        raise Unauthorized(f"Unauthorized for applications: {', '.join(map(str, foreign))}")

    check_versions(applications, expected_versions)
    return applications


def _validate_deadline(submission_deadline):
    if submission_deadline is not None and submission_deadline <= timezone.now():
        raise ValidationFailed("Submission deadline must be in the future.")


def _shortlist(application, submission_deadline):
    application.assert_transition(Application.SHORTLISTED)

    unchanged = (
        application.status == Application.SHORTLISTED
        and (
            submission_deadline is None
            or submission_deadline == application.submission_deadline
        )
    )
    if unchanged:
        return application

    fields = {"status": Application.SHORTLISTED}
    if submission_deadline is not None:
        fields["submission_deadline"] = submission_deadline
    return application.apply_update(**fields)


def _reject(application):
    application.assert_transition(Application.REJECTED)
    return application.apply_update(status=Application.REJECTED)


def apply_to_project(user, project_id, proposal=""):
    require_user(user)
    if not user.is_developer:
        raise Unauthorized("Only developers can apply to projects.")

    with transaction.atomic():
        try:
            project = Project.objects.select_for_update().get(pk=project_id)
        except Project.DoesNotExist:
            raise NotFound("Project not found")

        if project.company_id == user.id:
            raise Unauthorized("You cannot apply to your own project.")

        if not project.is_open:
            raise InvalidState("This project is not open for applications.")

        if Application.objects.filter(project=project, freelancer=user).exists():
            raise Conflict("You have already applied to this project")

        try:
            with transaction.atomic():
                application = Application.objects.create(
                    project=project,
                    freelancer=user,
                    proposal=proposal or "",
                )
        except IntegrityError:
            raise Conflict("You have already applied to this project")

    logger.info("User %s applied to project %s (application %s)", user.id, project.id, application.id)
    return application


def shortlist_application(user, application_id, expected_version, submission_deadline=None):
    """
    Invite an applicant to submit work, optionally with a deadline.
    `expected_version` is the application version the caller read.

    Shortlisting an already shortlisted application with the same (or no)
    deadline leaves it untouched.
    """
    require_user(user)
    _validate_deadline(submission_deadline)

    with transaction.atomic():
        application = _locked_application(application_id)
        assert_project_owner(user, application.project)
        application.check_version(expected_version)
        _shortlist(application, submission_deadline)

    logger.info("Company %s shortlisted application %s", user.id, application.id)
    return application


def reject_application(user, application_id, expected_version):
    require_user(user)

    with transaction.atomic():
        application = _locked_application(application_id)
        assert_project_owner(user, application.project)
        application.check_version(expected_version)
        _reject(application)

    logger.info("Company %s rejected application %s", user.id, application.id)
    return application


def bulk_shortlist(user, expected_versions, submission_deadline=None):
    require_user(user)
    _validate_deadline(submission_deadline)

    with transaction.atomic():
        applications = _locked_applications(user, expected_versions)
        for application in applications:
            _shortlist(application, submission_deadline)

    logger.info(
        "Company %s shortlisted applications %s",
        user.id, [a.pk for a in applications],
    )
    return applications


def bulk_reject(user, expected_versions):
    require_user(user)

    with transaction.atomic():
        applications = _locked_applications(user, expected_versions)
        for application in applications:
            _reject(application)

    logger.info(
        "Company %s rejected applications %s",
        user.id, [a.pk for a in applications],
    )
    return applications


def award_application(application):
    """Mark the application behind a winning submission. Caller holds the lock."""
    application.assert_transition(Application.AWARDED)
    return application.apply_update(status=Application.AWARDED)
