from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.cores.permissions import IsCompany, IsDeveloper

from . import services
from .selectors import ApplicationSelector
from .serializers import (
    ApplicationSerializer,
    ApplySerializer,
    BulkRejectSerializer,
    BulkShortlistSerializer,
    RejectSerializer,
    ShortlistSerializer,
)


class ApplyView(APIView):
    '''
    Allow a developer to apply to an open project
    '''
    permission_classes = [permissions.IsAuthenticated, IsDeveloper]

    def post(self, request):
        serializer = ApplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = services.apply_to_project(
            request.user,
            serializer.validated_data["project"],
            serializer.validated_data.get("proposal", ""),
        )
        return Response(
            {"success": True, "data": ApplicationSerializer(application).data},
            status=status.HTTP_201_CREATED,
        )


class ShortlistView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, application_id):
        serializer = ShortlistSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = services.shortlist_application(
            request.user,
            application_id,
            submission_deadline=serializer.validated_data.get("submission_deadline"),
            expected_version=serializer.validated_data["version"],
        )
        return Response({"success": True, "data": ApplicationSerializer(application).data})


class RejectView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, application_id):
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = services.reject_application(
            request.user,
            application_id,
            expected_version=serializer.validated_data["version"],
        )
        return Response({"success": True, "data": ApplicationSerializer(application).data})


class BulkShortlistView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = BulkShortlistSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        applications = services.bulk_shortlist(
            request.user,
            serializer.validated_data["applications"],
            submission_deadline=serializer.validated_data.get("submission_deadline"),
        )
        return Response({"success": True, "data": ApplicationSerializer(applications, many=True).data})


class BulkRejectView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = BulkRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        applications = services.bulk_reject(
            request.user,
            serializer.validated_data["applications"],
        )
        return Response({"success": True, "data": ApplicationSerializer(applications, many=True).data})


class ProjectApplicationsView(generics.ListAPIView):
    serializer_class = ApplicationSerializer
    permission_classes = [permissions.IsAuthenticated, IsCompany]

    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status"]

    def get_queryset(self):
        return ApplicationSelector.for_project(self.request.user, self.kwargs["project_id"])

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True)
        return Response({"success": True, "data": serializer.data})


class CompanyApplicationsView(ProjectApplicationsView):
    def get_queryset(self):
        return ApplicationSelector.for_company(self.request.user)


class MyApplicationsView(generics.ListAPIView):
    serializer_class = ApplicationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return ApplicationSelector.for_freelancer(self.request.user)

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"success": True, "data": serializer.data})
