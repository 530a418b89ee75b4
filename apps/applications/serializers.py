from rest_framework import serializers

from apps.cores.serializers import VersionedRowSerializer, version_map
from apps.users.serializers import UserMiniSerializer
from .models import Application


# ---------------- Project summary ----------------
class ApplicationProjectSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    budget = serializers.DecimalField(max_digits=12, decimal_places=2)
    category = serializers.CharField()
    status = serializers.CharField()
    company_id = serializers.IntegerField()


class ApplicationSerializer(serializers.ModelSerializer):
    project = ApplicationProjectSerializer(read_only=True)
    freelancer = UserMiniSerializer(read_only=True)
    deadline_passed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Application
        fields = [
            'id',
            'status',
            'proposal',
            'submission_deadline',
            'deadline_passed',
            'version',
            'created_at',
            'updated_at',
            'project',
            'freelancer',
        ]
        read_only_fields = fields


# ---------------- Apply ----------------
class ApplySerializer(serializers.Serializer):
    project = serializers.IntegerField()
    proposal = serializers.CharField(required=False, allow_blank=True, max_length=5000)

    def validate_proposal(self, value):
        if "<script>" in value.lower():
            raise serializers.ValidationError("Invalid content in proposal.")
        return value


# ---------------- Status changes ----------------
class ShortlistSerializer(serializers.Serializer):
    submission_deadline = serializers.DateTimeField(required=False, allow_null=True)
    version = serializers.IntegerField(min_value=1)


class RejectSerializer(serializers.Serializer):
    version = serializers.IntegerField(min_value=1)


class BulkRejectSerializer(serializers.Serializer):
    applications = VersionedRowSerializer(many=True, allow_empty=False)

    def validate_applications(self, value):
        return version_map(value)


class BulkShortlistSerializer(BulkRejectSerializer):
    submission_deadline = serializers.DateTimeField(required=False, allow_null=True)
