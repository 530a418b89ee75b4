from django.urls import path
from .views import (
    CheckDeadlineView,
    CompanySubmissionsView,
    MySubmissionsView,
    ProjectSubmissionsView,
    RateSubmissionView,
    SelectWinnerView,
    SubmissionCreateView,
    SubmissionDetailView,
)

urlpatterns = [
    path('submissions/', SubmissionCreateView.as_view(), name='submission-create'),
    path('submissions/mine/', MySubmissionsView.as_view(), name='my-submissions'),
    path('submissions/company/', CompanySubmissionsView.as_view(), name='company-submissions'),
    path('submissions/<int:submission_id>/', SubmissionDetailView.as_view(), name='submission-detail'),
    path('submissions/<int:submission_id>/rate/', RateSubmissionView.as_view(), name='submission-rate'),
    path('submissions/<int:submission_id>/select-winner/', SelectWinnerView.as_view(), name='submission-select-winner'),
    path('applications/<int:application_id>/deadline/', CheckDeadlineView.as_view(), name='application-deadline'),
    path('projects/<int:project_id>/submissions/', ProjectSubmissionsView.as_view(), name='project-submissions'),
]
