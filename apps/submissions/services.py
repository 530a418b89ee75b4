import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import URLValidator
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.applications.models import Application
from apps.applications.services import assert_project_owner, award_application
from apps.billing.models import Compensation
from apps.billing.services import (
    record_participation_compensations,
    record_winner_compensation,
    settings_for,
)
from apps.cores.exceptions import (
    Conflict,
    DeadlinePassed,
    InvalidState,
    NotFound,
    Unauthorized,
    ValidationFailed,
)
from apps.cores.workflow import require_user
from apps.users.models import Project

from .models import Submission

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "links")

_url_validator = URLValidator(schemes=["http", "https"])


# -----------------------------
# Validation helpers
# -----------------------------

def clean_links(links):
    """
    Validate an ordered list of {"type", "label", "url"} links and return
    normalized copies.
    """
    if links is None:
        return []
    if not isinstance(links, (list, tuple)):
        raise ValidationFailed("Links must be a list.")

    cleaned = []
    for position, link in enumerate(links, start=1):
        if not isinstance(link, dict):
            raise ValidationFailed(f"Link {position} is malformed.")

        link_type = (link.get("type") or "other").strip().lower()
        label = (link.get("label") or "").strip()
        url = (link.get("url") or "").strip()

        if link_type not in Submission.LINK_TYPES:
            raise ValidationFailed(f"Link {position} has unknown type '{link_type}'.")
        if not label:
            raise ValidationFailed(f"Link {position} needs a label.")
        try:
            _url_validator(url)
        except DjangoValidationError:
            raise ValidationFailed(f"Link {position} has an invalid URL.")

        cleaned.append({"type": link_type, "label": label, "url": url})
    return cleaned


def clean_title(title):
    title = (title or "").strip()
    if not title:
        raise ValidationFailed("Title is required.")
    if len(title) > 255:
        raise ValidationFailed("Title cannot exceed 255 characters.")
    return title


def _assert_before_deadline(deadline, message="Submission deadline has passed"):
    if deadline is not None and deadline < timezone.now():
        raise DeadlinePassed(message)


# -----------------------------
# Locking lookups
# -----------------------------

def _locked_own_submission(user, submission_id):
    try:
        submission = Submission.objects.select_for_update().get(pk=submission_id)
    except Submission.DoesNotExist:
        raise NotFound("Submission not found")
    if submission.freelancer_id != user.id:
        # Same answer as a missing row: a developer cannot probe others' work
        raise NotFound("Submission not found")
    return submission


def _locked_company_submission(user, submission_id):
    try:
        submission = (
            Submission.objects
            .select_for_update()
            .select_related("project")
            .get(pk=submission_id)
        )
    except Submission.DoesNotExist:
        raise NotFound("Submission not found")
    assert_project_owner(user, submission.project)
    return submission


# -----------------------------
# Freelancer operations
# -----------------------------

def create_submission(user, application_id, title, description="", links=None,
                      project_id=None, deadline=None):
    require_user(user)
    title = clean_title(title)
    links = clean_links(links)

    with transaction.atomic():
        try:
            application = (
                Application.objects
                .select_for_update()
                .get(pk=application_id, freelancer=user)
            )
        except Application.DoesNotExist:
            raise NotFound("Application not found")

        if project_id is not None and int(project_id) != application.project_id:
            raise ValidationFailed("Application does not belong to this project.")

        if application.status != Application.SHORTLISTED:
            raise InvalidState("Only shortlisted applications can submit designs")

        if Submission.objects.filter(application=application).exists():
            raise Conflict("Submission already exists for this application")

        _assert_before_deadline(application.submission_deadline)
        effective_deadline = deadline or application.submission_deadline
        _assert_before_deadline(effective_deadline)

        try:
            with transaction.atomic():
                submission = Submission.objects.create(
                    application=application,
                    freelancer=user,
                    project_id=application.project_id,
                    title=title,
                    description=description or "",
                    links=links,
                    deadline=effective_deadline,
                    status=Submission.SUBMITTED,
                )
        except IntegrityError:
            raise Conflict("Submission already exists for this application")

    logger.info(
        "User %s submitted %s for application %s",
        user.id, submission.id, application.id,
    )
    return submission


def update_submission(user, submission_id, changes, expected_version):
    """
    Patch title, description and/or links. Fields not present in
    `changes` keep their stored values. `expected_version` is the
    submission version the caller read.
    """
    require_user(user)

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationFailed(f"Cannot update: {', '.join(sorted(unknown))}")

    fields = {}
    if "title" in changes:
        fields["title"] = clean_title(changes["title"])
    if "description" in changes:
        fields["description"] = changes["description"] or ""
    if "links" in changes:
        fields["links"] = clean_links(changes["links"])

    with transaction.atomic():
        submission = _locked_own_submission(user, submission_id)
        submission.check_version(expected_version)
        _assert_before_deadline(submission.deadline)

        if submission.status != Submission.SUBMITTED:
            raise InvalidState("Reviewed submissions can no longer be edited.")

        if fields:
            submission.apply_update(**fields)

    logger.info("User %s updated submission %s", user.id, submission.id)
    return submission


def delete_submission(user, submission_id):
    require_user(user)

    with transaction.atomic():
        submission = _locked_own_submission(user, submission_id)
        _assert_before_deadline(submission.deadline, "Cannot delete submission after deadline")

        if submission.status != Submission.SUBMITTED:
            raise InvalidState("Reviewed submissions cannot be deleted.")

        submission.delete()

    logger.info("User %s deleted submission %s", user.id, submission_id)


# -----------------------------
# Company operations
# -----------------------------

def rate_submission(user, submission_id, rating, expected_version, feedback=None):
    require_user(user)

    try:
        rating = int(rating)
    except (TypeError, ValueError):
        raise ValidationFailed("Rating must be between 1 and 5")
    if rating < 1 or rating > 5:
        raise ValidationFailed("Rating must be between 1 and 5")

    with transaction.atomic():
        submission = _locked_company_submission(user, submission_id)
        submission.check_version(expected_version)

        # Ratings freeze once a winner has been picked
        if submission.status != Submission.SUBMITTED:
            raise InvalidState("Only submissions under review can be rated.")

        fields = {"rating": rating}
        if feedback is not None:
            fields["feedback"] = feedback
        submission.apply_update(**fields)

    logger.info("Company %s rated submission %s: %s", user.id, submission.id, rating)
    return submission


def select_winner(user, submission_id):
    """
    Award one submission and close the project's submission phase.

    In a single transaction, with the project and all of its submissions
    locked:
      * the target becomes `selected` with an approved winner compensation
        (a Compensation row only when the winner amount is positive),
      * its application becomes `awarded`,
      * every other `submitted` submission of the project becomes
        `rejected` with a pending participation compensation (rows only
        when the participation amount is positive).

    A project can have one winner; a repeated call fails with InvalidState.
    """
    require_user(user)

    with transaction.atomic():
        try:
            submission = Submission.objects.select_related("project").get(pk=submission_id)
        except Submission.DoesNotExist:
            raise NotFound("Submission not found")
        assert_project_owner(user, submission.project)

        # Lock order: project, submissions, application
        Project.objects.select_for_update().get(pk=submission.project_id)
        siblings = list(
            Submission.objects
            .select_for_update()
            .filter(project_id=submission.project_id)
            .order_by("pk")
        )
        winner = next((s for s in siblings if s.pk == submission.pk), None)
        if winner is None:
            raise NotFound("Submission not found")

        if any(s.status == Submission.SELECTED for s in siblings):
            raise InvalidState("A winner has already been selected for this project.")
        winner.assert_transition(Submission.SELECTED)

        application = Application.objects.select_for_update().get(pk=winner.application_id)
        if not application.can_transition_to(Application.AWARDED):
            raise InvalidState(
                f"Application #{application.pk} is '{application.status}' and cannot be awarded."
            )

        project_settings = settings_for(submission.project, lock=True)
        winner_amount = project_settings.winner_amount
        participation_amount = project_settings.participation_compensation
        now = timezone.now()

        winner.apply_update(
            status=Submission.SELECTED,
            compensation_amount=winner_amount,
            compensation_type=Compensation.WINNER,
            compensation_status=Compensation.APPROVED,
        )
        if winner_amount > 0:
            record_winner_compensation(winner, winner_amount, user, now)

        award_application(application)

        losers = [s for s in siblings if s.pk != winner.pk and s.status == Submission.SUBMITTED]
        for loser in losers:
            loser.apply_update(
                status=Submission.REJECTED,
                compensation_amount=participation_amount,
                compensation_type=Compensation.PARTICIPATION,
                compensation_status=Compensation.PENDING,
            )
        if losers and participation_amount > 0:
            record_participation_compensations(losers, participation_amount, now)

    logger.info(
        "Company %s selected submission %s as winner of project %s; %d others rejected",
        user.id, winner.pk, winner.project_id, len(losers),
    )
    return winner


def check_deadline(user, application_id):
    require_user(user)
    application = (
        Application.objects
        .select_related("project")
        .filter(pk=application_id)
        .first()
    )
    if application is None:
        raise NotFound("Application not found")
    if user.id not in (application.freelancer_id, application.project.company_id):
        raise Unauthorized()

    return {
        "deadline": application.submission_deadline,
        "deadline_passed": application.deadline_passed,
    }
