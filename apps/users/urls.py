from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    BrowseProjectDetailView,
    BrowseProjectsView,
    CompanyDashboardView,
    LoginView,
    MeView,
    ProjectViewSet,
    RegisterView,
    SelectRoleView,
    github_login,
    google_login,
)


# Router for the company's own projects

project_router = DefaultRouter()
project_router.register("projects", ProjectViewSet, basename="projects")

urlpatterns = [
    # Authentication & registration
    path('auth/register/', RegisterView.as_view(), name='register'),
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/google-login/', google_login, name='google-login'),
    path('auth/github-login/', github_login, name='github-login'),
    path('auth/select-role/', SelectRoleView.as_view(), name='select-role'),
    path('auth/me/', MeView.as_view(), name='me'),

    # Developer-facing project browsing
    path('browse/projects/', BrowseProjectsView.as_view(), name='browse-projects'),
    path('browse/projects/<int:pk>/', BrowseProjectDetailView.as_view(), name='browse-project-detail'),

    path('company/dashboard/', CompanyDashboardView.as_view(), name='company-dashboard'),

    # Project routes
    path('', include(project_router.urls)),
]
