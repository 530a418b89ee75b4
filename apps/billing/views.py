from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.cores.permissions import IsCompany, IsDeveloper

from . import services
from .selectors import (
    CompanyCompensationSelector,
    CompensationAccessSelector,
    EarningsSelector,
)
from .serializers import (
    ApproveSerializer,
    CompensationSerializer,
    MarkPaidSerializer,
    ProjectSettingsSerializer,
)


class ProjectSettingsView(APIView):
    permission_classes = [IsAuthenticated, IsCompany]

    def get(self, request, project_id):
        project_settings = services.get_project_settings(request.user, project_id)
        return Response({"success": True, "data": ProjectSettingsSerializer(project_settings).data})

    def patch(self, request, project_id):
        serializer = ProjectSettingsSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        project_settings = services.update_project_settings(
            request.user,
            project_id,
            **serializer.validated_data,
        )
        return Response({"success": True, "data": ProjectSettingsSerializer(project_settings).data})


class ApproveCompensationsView(APIView):
    permission_classes = [IsAuthenticated, IsCompany]

    def post(self, request):
        serializer = ApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        compensations = services.approve_compensations(
            request.user,
            serializer.validated_data["compensations"],
        )
        return Response({
            "success": True,
            "data": CompensationSerializer(compensations, many=True).data,
        })


class MarkPaidView(APIView):
    permission_classes = [IsAuthenticated, IsCompany]

    def post(self, request, compensation_id):
        serializer = MarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        compensation = services.mark_paid(
            request.user,
            compensation_id,
            expected_version=serializer.validated_data["version"],
            notes=serializer.validated_data.get("notes"),
        )
        return Response({"success": True, "data": CompensationSerializer(compensation).data})


class ProjectCompensationListView(ListAPIView):
    serializer_class = CompensationSerializer
    permission_classes = [IsAuthenticated, IsCompany]

    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "type"]

    def get_queryset(self):
        return CompensationAccessSelector.for_project(self.request.user, self.kwargs["project_id"])

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True)
        return Response({"success": True, "data": serializer.data})


class CompanyCompensationListView(ProjectCompensationListView):
    def get_queryset(self):
        return CompensationAccessSelector.for_company(self.request.user)


class CompanyCompensationSummaryView(APIView):
    permission_classes = [IsAuthenticated, IsCompany]

    def get(self, request):
        return Response({"success": True, "data": CompanyCompensationSelector.summary(request.user)})


class MyCompensationListView(ListAPIView):
    serializer_class = CompensationSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return CompensationAccessSelector.for_user(self.request.user)

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"success": True, "data": serializer.data})


class EarningsSummaryView(APIView):
    permission_classes = [IsAuthenticated, IsDeveloper]

    def get(self, request):
        return Response({"success": True, "data": EarningsSelector.freelancer_summary(request.user)})
