from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Custom user manager supporting email authentication."""

    def create_user(self, email, username=None, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")

        email = self.normalize_email(email)
        # OAuth sign-ups have no username of their own
        username = username or email

        user = self.model(
            email=email,
            username=username,
            **extra_fields
        )
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, username=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, username, password, **extra_fields)


class User(AbstractUser):
    ROLE_COMPANY = "company"
    ROLE_DEVELOPER = "developer"

    ROLE_CHOICES = (
        (ROLE_COMPANY, "Company"),
        (ROLE_DEVELOPER, "Developer"),
    )

    email = models.EmailField(unique=True, db_index=True)
    name = models.CharField(max_length=255, blank=True)
    # Empty until the user picks a side after first sign-in
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        db_table = "users"
        indexes = [
            models.Index(fields=["role", "is_active"], name="users_role_active_idx"),
        ]

    def __str__(self):
        return f"{self.email} ({self.role or 'no role'})"

    @property
    def is_company(self):
        return self.role == self.ROLE_COMPANY

    @property
    def is_developer(self):
        return self.role == self.ROLE_DEVELOPER

    @property
    def needs_role(self):
        return not self.role


class Project(models.Model):
    EXPERIENCE_LEVELS = [
        ('entry', 'Entry Level'),
        ('intermediate', 'Intermediate'),
        ('expert', 'Expert'),
    ]

    STATUS = [
        ('open', 'Open'),
        ('in-progress', 'In Progress'),
        ('completed', 'Completed'),
        ('closed', 'Closed'),
    ]

    company = models.ForeignKey(User, on_delete=models.CASCADE, related_name="projects")

    title = models.CharField(max_length=255)
    description = models.TextField()
    category = models.CharField(max_length=100, blank=True)

    budget = models.DecimalField(max_digits=12, decimal_places=2)
    duration = models.CharField(max_length=50, blank=True)
    deadline = models.DateField()

    experience_level = models.CharField(max_length=20, choices=EXPERIENCE_LEVELS, blank=True)
    skills = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=20, choices=STATUS, default='open')

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "projects"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="projects_status_idx"),
            models.Index(fields=["company", "status"], name="projects_company_status_idx"),
        ]

    def clean(self):
        if self.budget is None or self.budget <= 0:
            raise ValidationError("Budget must be a valid positive number.")

        if not isinstance(self.skills, list) or not all(isinstance(s, str) for s in self.skills):
            raise ValidationError("Skills must be a list of strings.")

    @property
    def is_open(self):
        return self.status == "open"

    def __str__(self):
        return f"Project: {self.title} by {self.company.email}"
