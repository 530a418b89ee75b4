from django.contrib import admin
from .models import Compensation, ProjectSettings


@admin.register(Compensation)
class CompensationAdmin(admin.ModelAdmin):
    list_display = ("id", "project", "freelancer", "type", "amount", "status", "approved_at", "paid_at")
    list_filter = ("status", "type")
    readonly_fields = ("version",)


@admin.register(ProjectSettings)
class ProjectSettingsAdmin(admin.ModelAdmin):
    list_display = ("project", "participation_compensation", "winner_compensation", "auto_approve_participation")
