from django.contrib import admin
from .models import Application


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ("id", "project", "freelancer", "status", "submission_deadline", "version")
    list_filter = ("status",)
    readonly_fields = ("version",)
