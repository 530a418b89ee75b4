import logging

from django.db import models
from django.db.models import F
from django.utils import timezone

from .exceptions import Conflict, InvalidState, NotAuthenticated, ValidationFailed

logger = logging.getLogger(__name__)


def require_user(user):
    if user is None or not getattr(user, "is_authenticated", False):
        raise NotAuthenticated()
    return user


def check_versions(rows, expected_versions):
    """Verify each locked row against the version its caller read, before any write."""
    for row in rows:
        row.check_version(expected_versions.get(row.pk))


class StatusWorkflowModel(models.Model):
    """
    Abstract base for entities that move through a status table.

    Subclasses declare TRANSITIONS = {current: {allowed targets}}.
    Rows carry a version that every write bumps. Callers pass the version
    they read; a write whose version no longer matches the stored one is
    rejected with Conflict.
    """

    TRANSITIONS = {}

    version = models.PositiveIntegerField(default=1)

    class Meta:
        abstract = True

    def can_transition_to(self, target):
        return target in self.TRANSITIONS.get(self.status, set())

    def assert_transition(self, target):
        if not self.can_transition_to(target):
            raise InvalidState(
                f"{self._meta.verbose_name.capitalize()} #{self.pk} cannot move "
                f"from '{self.status}' to '{target}'."
            )

    def check_version(self, expected_version):
        if expected_version is None:
            raise ValidationFailed("Version is required.")
        if int(expected_version) != self.version:
            raise Conflict(
                f"{self._meta.verbose_name.capitalize()} #{self.pk} was modified "
                f"(version {self.version}, expected {expected_version})."
            )

    def apply_update(self, **fields):
        """
        Write `fields` only if the stored version is still the one this
        instance was read at, then bump the version in place.
        """
        # QuerySet.update() skips auto_now
        if any(f.name == "updated_at" for f in self._meta.concrete_fields):
            fields.setdefault("updated_at", timezone.now())

        updated = (
            type(self).objects
            .filter(pk=self.pk, version=self.version)
            .update(version=F("version") + 1, **fields)
        )
        if updated != 1:
            logger.warning(
                "Stale write on %s #%s at version %s",
                self._meta.label, self.pk, self.version,
            )
            raise Conflict(
                f"{self._meta.verbose_name.capitalize()} #{self.pk} was modified "
                "by another request."
            )

        for name, value in fields.items():
            setattr(self, name, value)
        self.version += 1
        return self
