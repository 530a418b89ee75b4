from django.urls import path
from .views import (
    ApplyView,
    BulkRejectView,
    BulkShortlistView,
    CompanyApplicationsView,
    MyApplicationsView,
    ProjectApplicationsView,
    RejectView,
    ShortlistView,
)

urlpatterns = [
    path('applications/apply/', ApplyView.as_view(), name='application-apply'),
    path('applications/mine/', MyApplicationsView.as_view(), name='my-applications'),
    path('applications/company/', CompanyApplicationsView.as_view(), name='company-applications'),
    path('applications/bulk-shortlist/', BulkShortlistView.as_view(), name='application-bulk-shortlist'),
    path('applications/bulk-reject/', BulkRejectView.as_view(), name='application-bulk-reject'),
    path('applications/<int:application_id>/shortlist/', ShortlistView.as_view(), name='application-shortlist'),
    path('applications/<int:application_id>/reject/', RejectView.as_view(), name='application-reject'),
    path('projects/<int:project_id>/applications/', ProjectApplicationsView.as_view(), name='project-applications'),
]
