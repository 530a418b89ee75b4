from datetime import timedelta

import pytest
from django.utils import timezone

from apps.applications import services
from apps.applications.models import Application
from apps.applications.selectors import ApplicationSelector
from apps.cores.exceptions import (
    Conflict,
    InvalidState,
    NotAuthenticated,
    NotFound,
    Unauthorized,
    ValidationFailed,
)

pytestmark = pytest.mark.django_db


class TestApply:
    def test_developer_applies_to_open_project(self, developer, project):
        application = services.apply_to_project(developer, project.id, "Portfolio attached")

        assert application.status == Application.SUBMITTED
        assert application.version == 1
        assert application.proposal == "Portfolio attached"

    def test_second_application_conflicts(self, developer, project):
        services.apply_to_project(developer, project.id)

        with pytest.raises(Conflict):
            services.apply_to_project(developer, project.id)
        assert Application.objects.filter(project=project, freelancer=developer).count() == 1

    def test_closed_project_rejects_applications(self, developer, make_project, company):
        closed = make_project(company, status="closed")

        with pytest.raises(InvalidState):
            services.apply_to_project(developer, closed.id)

    def test_company_cannot_apply(self, other_company, project):
        with pytest.raises(Unauthorized):
            services.apply_to_project(other_company, project.id)

    def test_unknown_project(self, developer):
        with pytest.raises(NotFound):
            services.apply_to_project(developer, 999999)

    def test_anonymous_caller(self, project):
        with pytest.raises(NotAuthenticated):
            services.apply_to_project(None, project.id)


class TestShortlist:
    def test_sets_deadline_and_bumps_version(self, company, application, future):
        result = services.shortlist_application(company, application.id, 1, submission_deadline=future)

        application.refresh_from_db()
        assert result.status == Application.SHORTLISTED
        assert application.status == Application.SHORTLISTED
        assert application.submission_deadline == future
        assert application.version == 2

    def test_repeat_with_same_deadline_is_a_no_op(self, company, application, future):
        services.shortlist_application(company, application.id, 1, submission_deadline=future)
        services.shortlist_application(company, application.id, 2, submission_deadline=future)
        services.shortlist_application(company, application.id, 2)

        application.refresh_from_db()
        assert application.status == Application.SHORTLISTED
        assert application.version == 2

    def test_new_deadline_moves_it(self, company, shortlisted):
        later = timezone.now() + timedelta(days=14)

        services.shortlist_application(company, shortlisted.id, 1, submission_deadline=later)

        shortlisted.refresh_from_db()
        assert shortlisted.submission_deadline == later
        assert shortlisted.version == 2

    def test_deadline_in_the_past_is_invalid(self, company, application):
        with pytest.raises(ValidationFailed):
            services.shortlist_application(
                company,
                application.id,
                1,
                submission_deadline=timezone.now() - timedelta(hours=1),
            )

    def test_other_company_is_unauthorized(self, other_company, application):
        with pytest.raises(Unauthorized):
            services.shortlist_application(other_company, application.id, 1)

        application.refresh_from_db()
        assert application.status == Application.SUBMITTED

    def test_rejected_application_cannot_be_shortlisted(self, company, application):
        services.reject_application(company, application.id, 1)

        with pytest.raises(InvalidState):
            services.shortlist_application(company, application.id, 2)


class TestReject:
    def test_reject(self, company, application):
        services.reject_application(company, application.id, 1)

        application.refresh_from_db()
        assert application.status == Application.REJECTED
        assert application.version == 2

    def test_reject_twice_is_invalid(self, company, application):
        services.reject_application(company, application.id, 1)

        with pytest.raises(InvalidState):
            services.reject_application(company, application.id, 2)

    def test_awarded_is_terminal(self, company, make_application, project, developer):
        awarded = make_application(project, developer, status=Application.AWARDED)

        with pytest.raises(InvalidState):
            services.reject_application(company, awarded.id, 1)


class TestExpectedVersion:
    def test_stale_version_conflicts(self, company, application, future):
        services.shortlist_application(company, application.id, expected_version=1)

        with pytest.raises(Conflict):
            services.reject_application(company, application.id, expected_version=1)

        application.refresh_from_db()
        assert application.status == Application.SHORTLISTED

    def test_reject_and_shortlist_race_has_one_winner(self, company, application):
        # Both callers read the fresh application at version 1
        services.reject_application(company, application.id, 1)

        with pytest.raises(Conflict):
            services.shortlist_application(company, application.id, 1)

        application.refresh_from_db()
        assert application.status == Application.REJECTED
        assert application.version == 2

    def test_version_is_required(self, company, application):
        with pytest.raises(ValidationFailed):
            services.reject_application(company, application.id, None)

        application.refresh_from_db()
        assert application.status == Application.SUBMITTED
        assert application.version == 1

    def test_version_is_checked_before_status(self, company, application):
        services.reject_application(company, application.id, 1)

        # Stored row is rejected at version 2; a caller still holding
        # version 1 learns about the change, not about the status.
        with pytest.raises(Conflict):
            services.reject_application(company, application.id, expected_version=1)

    def test_concurrent_writer_loses(self, company, application):
        stale = Application.objects.get(pk=application.pk)
        services.reject_application(company, application.id, 1)

        with pytest.raises(Conflict):
            stale.apply_update(status=Application.SHORTLISTED)


class TestBulk:
    def test_bulk_reject(self, company, project, make_application, make_user):
        ids = [make_application(project, make_user()).id for _ in range(3)]

        rejected = services.bulk_reject(company, {pk: 1 for pk in ids})

        assert len(rejected) == 3
        assert set(
            Application.objects.filter(pk__in=ids).values_list("status", flat=True)
        ) == {Application.REJECTED}

    def test_bulk_shortlist_with_deadline(self, company, project, make_application, make_user, future):
        ids = [make_application(project, make_user()).id for _ in range(2)]

        services.bulk_shortlist(company, {pk: 1 for pk in ids}, submission_deadline=future)

        for application in Application.objects.filter(pk__in=ids):
            assert application.status == Application.SHORTLISTED
            assert application.submission_deadline == future
            assert application.version == 2

    def test_stale_row_fails_the_whole_batch(self, company, project, make_application, make_user):
        fresh = make_application(project, make_user())
        moved = make_application(project, make_user())
        services.shortlist_application(company, moved.id, 1)

        with pytest.raises(Conflict):
            services.bulk_reject(company, {fresh.id: 1, moved.id: 1})

        fresh.refresh_from_db()
        moved.refresh_from_db()
        assert fresh.status == Application.SUBMITTED
        assert moved.status == Application.SHORTLISTED

    def test_foreign_row_fails_the_whole_batch(
        self, company, other_company, project, make_project, make_application, make_user
    ):
        own = make_application(project, make_user())
        foreign = make_application(make_project(other_company), make_user())

        with pytest.raises(Unauthorized):
            services.bulk_reject(company, {own.id: 1, foreign.id: 1})

        own.refresh_from_db()
        foreign.refresh_from_db()
        assert own.status == Application.SUBMITTED
        assert foreign.status == Application.SUBMITTED

    def test_missing_row_fails_the_whole_batch(self, company, application):
        with pytest.raises(NotFound):
            services.bulk_reject(company, {application.id: 1, 999999: 1})

        application.refresh_from_db()
        assert application.status == Application.SUBMITTED

    def test_one_illegal_transition_rolls_back_the_rest(self, company, project, make_application, make_user):
        fresh = make_application(project, make_user())
        done = make_application(project, make_user(), status=Application.REJECTED)

        with pytest.raises(InvalidState):
            services.bulk_shortlist(company, {fresh.id: 1, done.id: 1})

        fresh.refresh_from_db()
        assert fresh.status == Application.SUBMITTED

    def test_empty_batch(self, company):
        with pytest.raises(ValidationFailed):
            services.bulk_reject(company, {})


class TestApplicationQueries:
    def test_project_listing_is_owner_only(self, company, other_company, project, application):
        assert list(ApplicationSelector.for_project(company, project.id)) == [application]

        with pytest.raises(Unauthorized):
            ApplicationSelector.for_project(other_company, project.id)

    def test_unknown_project(self, company):
        with pytest.raises(NotFound):
            ApplicationSelector.for_project(company, 999999)

    def test_freelancer_sees_only_their_applications(
        self, developer, other_developer, project, make_application
    ):
        mine = make_application(project, developer)
        make_application(project, other_developer)

        assert list(ApplicationSelector.for_freelancer(developer)) == [mine]

    def test_company_sees_applications_across_projects(
        self, company, make_project, make_application, developer
    ):
        first = make_application(make_project(company, title="One"), developer)
        second = make_application(make_project(company, title="Two"), developer)

        assert set(ApplicationSelector.for_company(company)) == {first, second}
