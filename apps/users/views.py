import logging

import requests
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Count, ProtectedError, Q, Sum
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from rest_framework import generics, permissions, status, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.cores.exceptions import InvalidState, NotAuthenticated, ValidationFailed
from apps.cores.permissions import IsCompany

from .models import Project
from .serializers import (
    LoginSerializer,
    ProjectBrowseSerializer,
    ProjectSerializer,
    RegisterSerializer,
    SelectRoleSerializer,
    UserSerializer,
    issue_tokens,
)

logger = logging.getLogger(__name__)
User = get_user_model()

GOOGLE_ISSUERS = ('accounts.google.com', 'https://accounts.google.com')


# -------- Register --------
class RegisterView(generics.GenericAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user %s as %s", user.id, user.role)

        return Response(
            {
                "success": True,
                "data": {
                    **issue_tokens(user),
                    "user": UserSerializer(user).data,
                },
            },
            status=status.HTTP_201_CREATED,
        )


# -------- Login --------
class LoginView(generics.GenericAPIView):
    serializer_class = LoginSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response({"success": True, "data": serializer.validated_data})


def verify_google_token(token):
    """Return the verified Google claims or raise NotAuthenticated."""
    try:
        idinfo = id_token.verify_oauth2_token(
            token,
            google_requests.Request(),
            settings.GOOGLE_CLIENT_ID,
        )
    except ValueError as e:
        logger.warning("Google token rejected: %s", e)
        raise NotAuthenticated("Invalid Google token")

    if idinfo.get('iss') not in GOOGLE_ISSUERS:
        raise NotAuthenticated("Invalid token issuer")

    if not idinfo.get("email"):
        raise NotAuthenticated("Email not found in Google data")

    return idinfo


def verify_github_token(access_token):
    """Return {"email", "name"} for a GitHub OAuth access token or raise NotAuthenticated."""
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Accept": "application/vnd.github+json",
    }
    try:
        profile = requests.get(f"{settings.GITHUB_API_URL}/user", headers=headers, timeout=10)
        profile.raise_for_status()
        emails = requests.get(f"{settings.GITHUB_API_URL}/user/emails", headers=headers, timeout=10)
        emails.raise_for_status()
    except requests.RequestException as e:
        logger.warning("GitHub token rejected: %s", e)
        raise NotAuthenticated("Invalid GitHub token")

    email = next(
        (row["email"] for row in emails.json() if row.get("primary") and row.get("verified")),
        None,
    )
    if not email:
        raise NotAuthenticated("No verified email on the GitHub account")

    data = profile.json()
    return {"email": email, "name": data.get("name") or data.get("login")}


def social_sign_in(claims, provider):
    """
    Find or create the account behind verified provider claims and issue
    tokens. New accounts have no password and no role yet.
    """
    email = claims["email"].lower()

    user, created = User.objects.get_or_create(
        email=email,
        defaults={
            "username": email,
            "name": claims.get("name") or email.split("@")[0],
        },
    )
    if created:
        user.set_unusable_password()
        user.save(update_fields=["password"])
        logger.info("Created user %s from %s sign-in", user.id, provider)

    if not user.is_active:
        raise NotAuthenticated("User account is disabled.")

    return Response({
        "success": True,
        "data": {
            **issue_tokens(user),
            "user": UserSerializer(user).data,
            "needs_role": user.needs_role,
        },
    })


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
def google_login(request):
    token = request.data.get("id_token")
    if not token:
        raise ValidationFailed("Token is required")

    return social_sign_in(verify_google_token(token), "Google")


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
def github_login(request):
    token = request.data.get("access_token")
    if not token:
        raise ValidationFailed("Token is required")

    return social_sign_in(verify_github_token(token), "GitHub")


class SelectRoleView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = SelectRoleSerializer(instance=request.user, data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User %s selected role %s", user.id, user.role)
        return Response({"success": True, "data": UserSerializer(user).data})


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({"success": True, "data": UserSerializer(request.user).data})


class ProjectViewSet(viewsets.ModelViewSet):
    """CRUD over the calling company's own projects."""

    serializer_class = ProjectSerializer
    permission_classes = [permissions.IsAuthenticated, IsCompany]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ["status", "category"]
    ordering_fields = ["created_at", "deadline", "budget"]

    def get_queryset(self):
        return Project.objects.filter(company=self.request.user)

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({"success": True, "data": serializer.data})

    def retrieve(self, request, pk=None):
        project = get_object_or_404(self.get_queryset(), pk=pk)
        serializer = self.get_serializer(project)
        return Response({"success": True, "data": serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = serializer.save()
        logger.info("Company %s created project %s", request.user.id, project.id)
        return Response(
            {"success": True, "data": self.get_serializer(project).data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None, *args, **kwargs):
        project = get_object_or_404(self.get_queryset(), pk=pk)
        partial = kwargs.pop('partial', False)

        serializer = self.get_serializer(project, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response({"success": True, "data": serializer.data})

    def partial_update(self, request, pk=None, *args, **kwargs):
        kwargs["partial"] = True
        return self.update(request, pk, *args, **kwargs)

    def destroy(self, request, pk=None, *args, **kwargs):
        project = get_object_or_404(self.get_queryset(), pk=pk)
        try:
            project.delete()
        except ProtectedError:
            raise InvalidState("Projects with compensation records cannot be deleted.")
        logger.info("Company %s deleted project %s", request.user.id, pk)
        return Response({"success": True, "data": None})


class BrowseProjectsView(generics.ListAPIView):
    """Open projects a developer can apply to."""

    serializer_class = ProjectBrowseSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ["category", "experience_level"]
    search_fields = ["title", "description"]
    ordering_fields = ["created_at", "deadline", "budget"]

    def get_queryset(self):
        return (
            Project.objects
            .select_related("company")
            .filter(status="open")
            .order_by("-created_at")
        )

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({"success": True, "data": serializer.data})


class BrowseProjectDetailView(generics.RetrieveAPIView):
    serializer_class = ProjectBrowseSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Project.objects.select_related("company")

    def retrieve(self, request, *args, **kwargs):
        return Response({"success": True, "data": self.get_serializer(self.get_object()).data})


class CompanyDashboardView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsCompany]

    def get(self, request):
        projects = Project.objects.filter(company=request.user)
        totals = projects.aggregate(
            total_projects=Count("id"),
            active_projects=Count("id", filter=Q(status="open")),
            total_budget=Sum("budget"),
        )
        total_applications = projects.aggregate(
            total=Count("applications")
        )["total"]

        return Response({
            "success": True,
            "data": {
                "total_projects": totals["total_projects"],
                "active_projects": totals["active_projects"],
                "total_applications": total_applications,
                "total_budget": totals["total_budget"] or 0,
            },
        })
