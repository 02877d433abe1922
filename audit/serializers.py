from rest_framework import serializers

from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    user_email = serializers.CharField(source='user.email', read_only=True, allow_null=True)
    user_name = serializers.CharField(source='user.display_name', read_only=True, allow_null=True)
    action_display = serializers.CharField(source='get_action_display', read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'user', 'user_email', 'user_name', 'user_role',
            'module', 'action', 'action_display', 'record_id', 'label',
            'old_values', 'new_values', 'ip_address', 'user_agent', 'created_at'
        ]
        read_only_fields = fields
