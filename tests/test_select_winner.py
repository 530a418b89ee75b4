from decimal import Decimal

import pytest

from apps.applications.models import Application
from apps.applications.services import reject_application
from apps.billing.models import Compensation, ProjectSettings
from apps.cores.exceptions import InvalidState, NotFound, Unauthorized
from apps.submissions import services
from apps.submissions.models import Submission

pytestmark = pytest.mark.django_db


class TestSelectWinner:
    def test_winner_and_losers(self, company, contest, paid_settings):
        winner, *losers = contest

        services.select_winner(company, winner.id)

        winner.refresh_from_db()
        assert winner.status == Submission.SELECTED
        assert winner.compensation_amount == Decimal("500.00")
        assert winner.compensation_type == Compensation.WINNER
        assert winner.compensation_status == Compensation.APPROVED
        assert Application.objects.get(pk=winner.application_id).status == Application.AWARDED

        award = Compensation.objects.get(submission=winner)
        assert award.type == Compensation.WINNER
        assert award.status == Compensation.APPROVED
        assert award.amount == Decimal("500.00")
        assert award.approved_by == company
        assert award.approved_at is not None

        for loser in losers:
            loser.refresh_from_db()
            assert loser.status == Submission.REJECTED
            assert loser.compensation_amount == Decimal("50.00")
            assert loser.compensation_type == Compensation.PARTICIPATION
            assert loser.compensation_status == Compensation.PENDING

            consolation = Compensation.objects.get(submission=loser)
            assert consolation.type == Compensation.PARTICIPATION
            assert consolation.status == Compensation.PENDING
            assert consolation.amount == Decimal("50.00")
            assert consolation.freelancer_id == loser.freelancer_id
            assert consolation.project_id == loser.project_id

        assert Compensation.objects.count() == 3

    def test_every_write_bumps_versions(self, company, contest, paid_settings):
        services.select_winner(company, contest[0].id)

        assert set(Submission.objects.values_list("version", flat=True)) == {2}

    def test_second_selection_is_refused(self, company, contest, paid_settings):
        services.select_winner(company, contest[0].id)

        with pytest.raises(InvalidState):
            services.select_winner(company, contest[0].id)
        with pytest.raises(InvalidState):
            services.select_winner(company, contest[1].id)

        assert Compensation.objects.count() == 3
        assert Submission.objects.filter(status=Submission.SELECTED).count() == 1

    def test_zero_participation_writes_mirrors_only(self, company, contest, project):
        ProjectSettings.objects.create(
            project=project,
            winner_compensation=Decimal("800.00"),
            participation_compensation=Decimal("0.00"),
        )

        services.select_winner(company, contest[0].id)

        assert list(Compensation.objects.values_list("type", flat=True)) == [Compensation.WINNER]
        loser = Submission.objects.get(pk=contest[1].pk)
        assert loser.status == Submission.REJECTED
        assert loser.compensation_amount == Decimal("0.00")
        assert loser.compensation_status == Compensation.PENDING

    def test_defaults_when_project_has_no_settings(self, company, contest, project):
        services.select_winner(company, contest[0].id)

        # No winner amount configured; default participation applies
        assert not Compensation.objects.filter(type=Compensation.WINNER).exists()
        assert Compensation.objects.filter(
            type=Compensation.PARTICIPATION, amount=Decimal("50.00")
        ).count() == 2
        assert ProjectSettings.objects.filter(project=project).exists()

    def test_sole_submission(self, company, shortlisted, submit_work, paid_settings):
        submission = submit_work(shortlisted)

        services.select_winner(company, submission.id)

        assert Submission.objects.get(pk=submission.pk).status == Submission.SELECTED
        assert Compensation.objects.count() == 1

    def test_rejected_application_cannot_win(self, company, contest, paid_settings):
        reject_application(company, contest[0].application_id, 1)

        with pytest.raises(InvalidState):
            services.select_winner(company, contest[0].id)

        assert not Compensation.objects.exists()
        assert set(Submission.objects.values_list("status", flat=True)) == {Submission.SUBMITTED}

    def test_other_company(self, other_company, contest):
        with pytest.raises(Unauthorized):
            services.select_winner(other_company, contest[0].id)

        assert not Submission.objects.exclude(status=Submission.SUBMITTED).exists()

    def test_unknown_submission(self, company):
        with pytest.raises(NotFound):
            services.select_winner(company, 999999)

    def test_submission_deleted_before_locks_are_taken(self, company, contest, paid_settings, monkeypatch):
        target = contest[0]
        owner_check = services.assert_project_owner

        def owner_check_then_delete(user, project):
            owner_check(user, project)
            Submission.objects.filter(pk=target.pk).delete()

        monkeypatch.setattr(services, "assert_project_owner", owner_check_then_delete)

        with pytest.raises(NotFound):
            services.select_winner(company, target.id)

        assert not Compensation.objects.exists()
        assert not Submission.objects.exclude(status=Submission.SUBMITTED).exists()

    def test_rating_freezes_after_selection(self, company, contest, paid_settings):
        services.select_winner(company, contest[0].id)

        with pytest.raises(InvalidState):
            services.rate_submission(company, contest[1].id, 2, 2)

    def test_losers_cannot_edit_or_delete(self, company, contest, paid_settings):
        services.select_winner(company, contest[0].id)
        loser = contest[1]

        with pytest.raises(InvalidState):
            services.update_submission(loser.freelancer, loser.id, {"title": "Too late"}, 2)
        with pytest.raises(InvalidState):
            services.delete_submission(loser.freelancer, loser.id)
