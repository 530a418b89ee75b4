from rest_framework.permissions import BasePermission


class IsCompany(BasePermission):
    message = "Only company accounts can do this."

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated
            and request.user.role == "company"
        )


class IsDeveloper(BasePermission):
    message = "Only developer accounts can do this."

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated
            and request.user.role == "developer"
        )
