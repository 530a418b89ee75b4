from datetime import timedelta

import pytest
from django.utils import timezone

from apps.applications.models import Application
from apps.applications.services import reject_application
from apps.cores.exceptions import (
    Conflict,
    DeadlinePassed,
    InvalidState,
    NotFound,
    Unauthorized,
    ValidationFailed,
)
from apps.submissions import services
from apps.submissions.models import Submission
from apps.submissions.selectors import SubmissionSelector

pytestmark = pytest.mark.django_db

PAST = timedelta(hours=1)


class TestCreateSubmission:
    def test_shortlisted_application_submits(self, shortlisted, submit_work, figma_link):
        submission = submit_work(shortlisted, description="Three variants")

        assert submission.status == Submission.SUBMITTED
        assert submission.project_id == shortlisted.project_id
        assert submission.freelancer_id == shortlisted.freelancer_id
        assert submission.deadline == shortlisted.submission_deadline
        assert submission.links == [figma_link]
        assert submission.version == 1

    def test_submitted_application_cannot_submit(self, application, submit_work):
        with pytest.raises(InvalidState):
            submit_work(application)
        assert not Submission.objects.exists()

    def test_one_submission_per_application(self, shortlisted, submit_work):
        submit_work(shortlisted)

        with pytest.raises(Conflict):
            submit_work(shortlisted, title="Second try")

    def test_application_deadline_passed(self, shortlisted, submit_work):
        Application.objects.filter(pk=shortlisted.pk).update(
            submission_deadline=timezone.now() - PAST
        )

        with pytest.raises(DeadlinePassed):
            submit_work(shortlisted)

    def test_explicit_deadline_passed(self, make_application, project, developer, submit_work):
        no_deadline = make_application(project, developer, status=Application.SHORTLISTED)
        Application.objects.filter(pk=no_deadline.pk).update(submission_deadline=None)

        with pytest.raises(DeadlinePassed):
            submit_work(no_deadline, deadline=timezone.now() - PAST)

    def test_project_mismatch(self, shortlisted, submit_work, make_project, company):
        elsewhere = make_project(company, title="Elsewhere")

        with pytest.raises(ValidationFailed):
            submit_work(shortlisted, project_id=elsewhere.id)

    def test_someone_elses_application_is_not_found(self, shortlisted, other_developer):
        with pytest.raises(NotFound):
            services.create_submission(other_developer, shortlisted.id, title="Mine now")

    @pytest.mark.parametrize("links", [
        [{"type": "figma", "label": "Mockups", "url": "ftp://files.example.com/a"}],
        [{"type": "dropbox", "label": "Files", "url": "https://dropbox.com/x"}],
        [{"type": "github", "label": "", "url": "https://github.com/acme/site"}],
        ["https://github.com/acme/site"],
    ])
    def test_invalid_links(self, shortlisted, submit_work, links):
        with pytest.raises(ValidationFailed):
            submit_work(shortlisted, links=links)

    def test_blank_title(self, shortlisted, submit_work):
        with pytest.raises(ValidationFailed):
            submit_work(shortlisted, title="   ")

    def test_link_type_defaults_to_other(self, shortlisted, submit_work):
        submission = submit_work(
            shortlisted,
            links=[{"label": "Case study", "url": "https://example.com/case"}],
        )

        assert submission.links == [
            {"type": "other", "label": "Case study", "url": "https://example.com/case"},
        ]


class TestUpdateSubmission:
    def test_untouched_fields_are_preserved(self, shortlisted, submit_work, figma_link):
        submission = submit_work(shortlisted, description="Original notes")

        services.update_submission(shortlisted.freelancer, submission.id, {"title": "Homepage v2"}, 1)

        submission.refresh_from_db()
        assert submission.title == "Homepage v2"
        assert submission.description == "Original notes"
        assert submission.links == [figma_link]
        assert submission.version == 2

    def test_replaces_links_in_order(self, shortlisted, submit_work):
        submission = submit_work(shortlisted)
        links = [
            {"type": "github", "label": "Code", "url": "https://github.com/acme/site"},
            {"type": "drive", "label": "Assets", "url": "https://drive.google.com/x"},
        ]

        services.update_submission(shortlisted.freelancer, submission.id, {"links": links}, 1)

        submission.refresh_from_db()
        assert [link["label"] for link in submission.links] == ["Code", "Assets"]

    def test_other_developer_gets_not_found(self, shortlisted, submit_work, other_developer):
        submission = submit_work(shortlisted)

        with pytest.raises(NotFound):
            services.update_submission(other_developer, submission.id, {"title": "Hijack"}, 1)

    def test_stale_version(self, shortlisted, submit_work):
        submission = submit_work(shortlisted)
        services.update_submission(shortlisted.freelancer, submission.id, {"title": "v2"}, expected_version=1)

        with pytest.raises(Conflict):
            services.update_submission(shortlisted.freelancer, submission.id, {"title": "v3"}, expected_version=1)

    def test_version_is_required(self, shortlisted, submit_work):
        submission = submit_work(shortlisted)

        with pytest.raises(ValidationFailed):
            services.update_submission(shortlisted.freelancer, submission.id, {"title": "v2"}, None)

        submission.refresh_from_db()
        assert submission.title == "Homepage concept"

    def test_after_deadline(self, shortlisted, submit_work):
        submission = submit_work(shortlisted)
        Submission.objects.filter(pk=submission.pk).update(deadline=timezone.now() - PAST)

        with pytest.raises(DeadlinePassed):
            services.update_submission(shortlisted.freelancer, submission.id, {"title": "Late"}, 1)

    def test_unknown_field(self, shortlisted, submit_work):
        submission = submit_work(shortlisted)

        with pytest.raises(ValidationFailed):
            services.update_submission(shortlisted.freelancer, submission.id, {"rating": 5}, 1)


class TestDeleteSubmission:
    def test_delete_before_deadline(self, shortlisted, submit_work):
        submission = submit_work(shortlisted)

        services.delete_submission(shortlisted.freelancer, submission.id)

        assert not Submission.objects.filter(pk=submission.pk).exists()

    def test_delete_after_deadline(self, shortlisted, submit_work):
        submission = submit_work(shortlisted)
        Submission.objects.filter(pk=submission.pk).update(deadline=timezone.now() - PAST)

        with pytest.raises(DeadlinePassed) as excinfo:
            services.delete_submission(shortlisted.freelancer, submission.id)

        assert str(excinfo.value.detail) == "Cannot delete submission after deadline"
        assert Submission.objects.filter(pk=submission.pk).exists()

    def test_other_developer_gets_not_found(self, shortlisted, submit_work, other_developer):
        submission = submit_work(shortlisted)

        with pytest.raises(NotFound):
            services.delete_submission(other_developer, submission.id)


class TestRateSubmission:
    def test_rate_with_feedback(self, company, shortlisted, submit_work):
        submission = submit_work(shortlisted)

        services.rate_submission(company, submission.id, 4, 1, feedback="Strong concept")

        submission.refresh_from_db()
        assert submission.rating == 4
        assert submission.feedback == "Strong concept"
        assert submission.version == 2

    @pytest.mark.parametrize("rating", [0, 6, "five", None])
    def test_out_of_range(self, company, shortlisted, submit_work, rating):
        submission = submit_work(shortlisted)

        with pytest.raises(ValidationFailed):
            services.rate_submission(company, submission.id, rating, 1)

    def test_other_company(self, other_company, shortlisted, submit_work):
        submission = submit_work(shortlisted)

        with pytest.raises(Unauthorized):
            services.rate_submission(other_company, submission.id, 5, 1)

    def test_stale_version(self, company, shortlisted, submit_work):
        submission = submit_work(shortlisted)
        services.rate_submission(company, submission.id, 3, 1)

        with pytest.raises(Conflict):
            services.rate_submission(company, submission.id, 5, expected_version=1)


class TestCheckDeadline:
    def test_freelancer_and_company_can_check(self, company, shortlisted):
        for user in (shortlisted.freelancer, company):
            result = services.check_deadline(user, shortlisted.id)
            assert result == {
                "deadline": shortlisted.submission_deadline,
                "deadline_passed": False,
            }

    def test_passed(self, shortlisted):
        Application.objects.filter(pk=shortlisted.pk).update(
            submission_deadline=timezone.now() - PAST
        )

        assert services.check_deadline(shortlisted.freelancer, shortlisted.id)["deadline_passed"] is True

    def test_outsider(self, other_developer, shortlisted):
        with pytest.raises(Unauthorized):
            services.check_deadline(other_developer, shortlisted.id)


class TestSubmissionQueries:
    def test_scoping(self, company, other_company, contest, project):
        assert len(SubmissionSelector.for_project(company, project.id)) == 3
        assert len(SubmissionSelector.for_company(company)) == 3
        assert list(SubmissionSelector.for_company(other_company)) == []

        freelancer = contest[0].freelancer
        assert list(SubmissionSelector.for_freelancer(freelancer)) == [contest[0]]

    def test_rejected_application_keeps_its_submission(self, company, shortlisted, submit_work):
        submission = submit_work(shortlisted)
        reject_application(company, shortlisted.id, 1)

        submission.refresh_from_db()
        assert submission.status == Submission.SUBMITTED
