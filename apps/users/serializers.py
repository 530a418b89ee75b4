import re
from decimal import Decimal

from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from apps.cores.exceptions import Conflict
from .models import Project


User = get_user_model()


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    return {
        "refresh": str(refresh),
        "access": str(refresh.access_token),
    }


class UserSerializer(serializers.ModelSerializer):
    needs_role = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "username", "name", "role", "needs_role", "created_at"]
        read_only_fields = fields


class UserMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email"]


# -------- Register (email + password) --------
class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    # Left empty, the user picks a side later through select-role
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={'input_type': 'password'},
    )

    def validate_email(self, value):
        value = value.lower().strip()
        if not re.match(r"[^@]+@[^@]+\.[^@]+", value):
            raise serializers.ValidationError("Enter a valid email address.")
        if User.objects.filter(email=value).exists():
            raise Conflict("Email already registered.")
        return value

    def validate_password(self, value):
        if not re.search(r"[A-Za-z]", value) or not re.search(r"\d", value):
            raise serializers.ValidationError("Password must contain letters and digits.")
        return value

    @transaction.atomic
    def create(self, validated_data):
        first_name = validated_data["first_name"].strip()
        last_name = validated_data["last_name"].strip()

        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=first_name,
            last_name=last_name,
            name=f"{first_name} {last_name}",
            role=validated_data.get("role", ""),
        )


# ---------- Login ----------
class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, data):
        email = data.get('email').lower().strip()
        password = data.get('password')

        user = authenticate(email=email, password=password)
        if not user:
            raise serializers.ValidationError("Invalid credentials")

        if not user.is_active:
            raise serializers.ValidationError("User account is disabled.")

        return {
            **issue_tokens(user),
            "user": UserSerializer(user).data,
        }


class SelectRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)

    def update(self, instance, validated_data):
        instance.role = validated_data["role"]
        instance.save(update_fields=["role"])
        return instance


# ---------- Projects ----------
class ProjectSerializer(serializers.ModelSerializer):
    company = UserMiniSerializer(read_only=True)
    skills = serializers.ListField(
        child=serializers.CharField(max_length=64),
        required=False,
    )
    budget = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.01"),
    )

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "description",
            "category",
            "budget",
            "duration",
            "deadline",
            "experience_level",
            "skills",
            "status",
            "created_at",
            "updated_at",
            "company",
        ]
        read_only_fields = ["id", "created_at", "updated_at", "company"]

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required.")
        return value.strip()

    def validate_description(self, value):
        if not value.strip():
            raise serializers.ValidationError("Description is required.")
        return value

    def validate_skills(self, value):
        # Keep order, drop blanks and duplicates
        seen = []
        for skill in value:
            skill = skill.strip()
            if skill and skill not in seen:
                seen.append(skill)
        return seen

    def validate_status(self, value):
        if self.instance is None and value != "open":
            raise serializers.ValidationError("New projects always start open.")
        return value

    def create(self, validated_data):
        company = self.context["request"].user
        return Project.objects.create(company=company, **validated_data)


class ProjectBrowseSerializer(serializers.ModelSerializer):
    company = UserMiniSerializer(read_only=True)
    already_applied = serializers.SerializerMethodField()
    applicants = serializers.IntegerField(source="applications.count", read_only=True)

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "description",
            "category",
            "budget",
            "duration",
            "deadline",
            "experience_level",
            "skills",
            "status",
            "created_at",
            "company",
            "applicants",
            "already_applied",
        ]
        read_only_fields = fields

    def get_already_applied(self, obj):
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.applications.filter(freelancer=request.user).exists()
        return False
