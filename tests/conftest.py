import itertools
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.applications.models import Application
from apps.billing.models import ProjectSettings
from apps.submissions import services as submission_services
from apps.users.models import Project, User


@pytest.fixture(autouse=True)
def fast_passwords(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role=User.ROLE_DEVELOPER, email=None, password="secret123", **extra):
        n = next(counter)
        email = email or f"{role or 'user'}{n}@example.com"
        return User.objects.create_user(
            email=email,
            password=password,
            role=role,
            name=extra.pop("name", f"{role.title() or 'User'} {n}"),
            **extra,
        )

    return _make


@pytest.fixture
def company(make_user):
    return make_user(User.ROLE_COMPANY, email="acme@example.com")


@pytest.fixture
def other_company(make_user):
    return make_user(User.ROLE_COMPANY, email="globex@example.com")


@pytest.fixture
def developer(make_user):
    return make_user(User.ROLE_DEVELOPER, email="dev@example.com")


@pytest.fixture
def other_developer(make_user):
    return make_user(User.ROLE_DEVELOPER, email="dev2@example.com")


@pytest.fixture
def make_project(db):
    def _make(company, **fields):
        fields.setdefault("title", "Landing page redesign")
        fields.setdefault("description", "New landing page for the spring campaign.")
        fields.setdefault("category", "design")
        fields.setdefault("budget", Decimal("1000.00"))
        fields.setdefault("deadline", (timezone.now() + timedelta(days=30)).date())
        fields.setdefault("skills", ["figma"])
        return Project.objects.create(company=company, **fields)

    return _make


@pytest.fixture
def project(make_project, company):
    return make_project(company)


@pytest.fixture
def future():
    return timezone.now() + timedelta(days=7)


@pytest.fixture
def make_application(db, future):
    def _make(project, freelancer, status=Application.SUBMITTED, submission_deadline=None):
        if status == Application.SHORTLISTED and submission_deadline is None:
            submission_deadline = future
        return Application.objects.create(
            project=project,
            freelancer=freelancer,
            proposal="I can do this.",
            status=status,
            submission_deadline=submission_deadline,
        )

    return _make


@pytest.fixture
def application(make_application, project, developer):
    return make_application(project, developer)


@pytest.fixture
def shortlisted(make_application, project, developer):
    return make_application(project, developer, status=Application.SHORTLISTED)


@pytest.fixture
def figma_link():
    return {"type": "figma", "label": "Mockups", "url": "https://www.figma.com/file/abc123"}


@pytest.fixture
def submit_work(figma_link):
    def _submit(application, title="Homepage concept", **kwargs):
        kwargs.setdefault("links", [figma_link])
        return submission_services.create_submission(
            application.freelancer,
            application.id,
            title=title,
            **kwargs,
        )

    return _submit


@pytest.fixture
def contest(make_user, make_application, submit_work, project):
    """A project with three shortlisted developers who all submitted work."""
    submissions = []
    for _ in range(3):
        freelancer = make_user(User.ROLE_DEVELOPER)
        application = make_application(project, freelancer, status=Application.SHORTLISTED)
        submissions.append(submit_work(application))
    return submissions


@pytest.fixture
def paid_settings(project):
    return ProjectSettings.objects.create(
        project=project,
        winner_compensation=Decimal("500.00"),
        participation_compensation=Decimal("50.00"),
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client
