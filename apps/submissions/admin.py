from django.contrib import admin
from .models import Submission


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "project", "freelancer", "status", "rating", "compensation_status")
    list_filter = ("status", "compensation_status")
    search_fields = ("title",)
    readonly_fields = ("version",)
