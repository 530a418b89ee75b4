# billing/urls.py
from django.urls import path
from .views import (
    ApproveCompensationsView,
    CompanyCompensationListView,
    CompanyCompensationSummaryView,
    EarningsSummaryView,
    MarkPaidView,
    MyCompensationListView,
    ProjectCompensationListView,
    ProjectSettingsView,
)

urlpatterns = [
    # -------- Company : settings & review --------
    path(
        "projects/<int:project_id>/settings/",
        ProjectSettingsView.as_view(),
        name="project-settings",
    ),
    path(
        "projects/<int:project_id>/compensations/",
        ProjectCompensationListView.as_view(),
        name="project-compensations",
    ),
    path(
        "compensations/company/",
        CompanyCompensationListView.as_view(),
        name="company-compensations",
    ),
    path(
        "compensations/company/summary/",
        CompanyCompensationSummaryView.as_view(),
        name="company-compensation-summary",
    ),
    path(
        "compensations/approve/",
        ApproveCompensationsView.as_view(),
        name="compensation-approve",
    ),
    path(
        "compensations/<int:compensation_id>/mark-paid/",
        MarkPaidView.as_view(),
        name="compensation-mark-paid",
    ),

    # -------- Developer : earnings --------
    path("compensations/mine/", MyCompensationListView.as_view(), name="my-compensations"),
    path(
        "earnings/summary/",
        EarningsSummaryView.as_view(),
        name="earnings-summary",
    ),
]
