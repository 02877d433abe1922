"""
Audit Trail Models

Every create, update and delete performed through the back-office API is
recorded with who did it, from where, and the field values that changed.
"""

import uuid

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class AuditAction(models.TextChoices):
    CREATE = 'CREATE', 'Create'
    UPDATE = 'UPDATE', 'Update'
    DELETE = 'DELETE', 'Delete'


class AuditLog(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs'
    )
    user_role = models.CharField(max_length=30, blank=True)

    module = models.CharField(max_length=100, db_index=True, help_text="Business area, e.g. 'Vendor Bills'")
    action = models.CharField(max_length=10, choices=AuditAction.choices, db_index=True)
    record_id = models.CharField(max_length=64, blank=True, db_index=True)
    label = models.CharField(max_length=255, blank=True)

    old_values = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_values = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['module', 'action']),
        ]

    def __str__(self):
        return f"{self.action} {self.module} {self.record_id}"
