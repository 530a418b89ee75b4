from django.contrib import admin
from .models import User, Project


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "name", "role", "is_active", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("email", "name")


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "company", "budget", "deadline", "status")
    list_filter = ("status", "experience_level")
    search_fields = ("title",)
