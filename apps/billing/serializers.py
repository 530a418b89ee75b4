from decimal import Decimal

from rest_framework import serializers

from apps.cores.serializers import VersionedRowSerializer, version_map

from .models import Compensation, ProjectSettings


class CompensationSerializer(serializers.ModelSerializer):
    freelancer_name = serializers.SerializerMethodField()
    project_title = serializers.CharField(source="project.title", read_only=True)
    submission_title = serializers.CharField(source="submission.title", read_only=True)
    submission_status = serializers.CharField(source="submission.status", read_only=True)

    class Meta:
        model = Compensation
        fields = (
            "id",
            "submission",
            "submission_title",
            "submission_status",
            "project",
            "project_title",
            "freelancer",
            "freelancer_name",
            "amount",
            "type",
            "status",
            "approved_by",
            "approved_at",
            "paid_at",
            "notes",
            "version",
            "created_at",
        )
        read_only_fields = fields

    def get_freelancer_name(self, obj):
        user = obj.freelancer
        return user.name or user.email


class ProjectSettingsSerializer(serializers.ModelSerializer):
    participation_compensation = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
    )
    winner_compensation = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = ProjectSettings
        fields = (
            "project",
            "participation_compensation",
            "winner_compensation",
            "auto_approve_participation",
            "updated_at",
        )
        read_only_fields = ("project", "updated_at")


class ApproveSerializer(serializers.Serializer):
    compensations = VersionedRowSerializer(many=True, allow_empty=False)

    def validate_compensations(self, value):
        return version_map(value)


class MarkPaidSerializer(serializers.Serializer):
    version = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True)
