from rest_framework import serializers

from apps.users.serializers import UserMiniSerializer
from .models import Submission


class SubmissionLinkSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Submission.LINK_TYPES, default="other")
    label = serializers.CharField(max_length=120)
    url = serializers.URLField(max_length=2000)


class SubmissionSerializer(serializers.ModelSerializer):
    freelancer = UserMiniSerializer(read_only=True)
    project_title = serializers.CharField(source="project.title", read_only=True)
    application_status = serializers.CharField(source="application.status", read_only=True)
    deadline_passed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Submission
        fields = (
            "id",
            "application",
            "application_status",
            "project",
            "project_title",
            "freelancer",
            "title",
            "description",
            "links",
            "status",
            "rating",
            "feedback",
            "deadline",
            "deadline_passed",
            "submitted_at",
            "compensation_amount",
            "compensation_type",
            "compensation_status",
            "version",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class SubmissionCreateSerializer(serializers.Serializer):
    application_id = serializers.IntegerField()
    project_id = serializers.IntegerField(required=False)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    links = SubmissionLinkSerializer(many=True, required=False)
    deadline = serializers.DateTimeField(required=False, allow_null=True)


class SubmissionUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    links = SubmissionLinkSerializer(many=True, required=False)
    version = serializers.IntegerField(min_value=1)


class RateSerializer(serializers.Serializer):
    rating = serializers.IntegerField()
    feedback = serializers.CharField(required=False, allow_blank=True)
    version = serializers.IntegerField(min_value=1)
