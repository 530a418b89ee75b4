from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.cores.permissions import IsCompany, IsDeveloper

from . import services
from .selectors import SubmissionSelector
from .serializers import (
    RateSerializer,
    SubmissionCreateSerializer,
    SubmissionSerializer,
    SubmissionUpdateSerializer,
)


class SubmissionCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsDeveloper]

    def post(self, request):
        serializer = SubmissionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        submission = services.create_submission(
            request.user,
            data["application_id"],
            title=data["title"],
            description=data.get("description", ""),
            links=data.get("links", []),
            project_id=data.get("project_id"),
            deadline=data.get("deadline"),
        )
        return Response(
            {"success": True, "data": SubmissionSerializer(submission).data},
            status=status.HTTP_201_CREATED,
        )


class SubmissionDetailView(APIView):
    """PATCH / DELETE on the caller's own submission."""

    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, submission_id):
        serializer = SubmissionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        changes = dict(serializer.validated_data)
        expected_version = changes.pop("version")

        submission = services.update_submission(
            request.user,
            submission_id,
            changes,
            expected_version=expected_version,
        )
        return Response({"success": True, "data": SubmissionSerializer(submission).data})

    def delete(self, request, submission_id):
        services.delete_submission(request.user, submission_id)
        return Response({"success": True, "data": None})


class RateSubmissionView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, submission_id):
        serializer = RateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        submission = services.rate_submission(
            request.user,
            submission_id,
            serializer.validated_data["rating"],
            feedback=serializer.validated_data.get("feedback"),
            expected_version=serializer.validated_data["version"],
        )
        return Response({"success": True, "data": SubmissionSerializer(submission).data})


class SelectWinnerView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, submission_id):
        submission = services.select_winner(request.user, submission_id)
        return Response({"success": True, "data": SubmissionSerializer(submission).data})


class CheckDeadlineView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, application_id):
        return Response({
            "success": True,
            "data": services.check_deadline(request.user, application_id),
        })


class ProjectSubmissionsView(generics.ListAPIView):
    serializer_class = SubmissionSerializer
    permission_classes = [permissions.IsAuthenticated, IsCompany]

    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status"]

    def get_queryset(self):
        return SubmissionSelector.for_project(self.request.user, self.kwargs["project_id"])

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True)
        return Response({"success": True, "data": serializer.data})


class CompanySubmissionsView(ProjectSubmissionsView):
    def get_queryset(self):
        return SubmissionSelector.for_company(self.request.user)


class MySubmissionsView(generics.ListAPIView):
    serializer_class = SubmissionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return SubmissionSelector.for_freelancer(self.request.user)

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"success": True, "data": serializer.data})
