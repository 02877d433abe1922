from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'module', 'action', 'record_id', 'user', 'user_role', 'ip_address')
    list_filter = ('module', 'action', 'user_role')
    search_fields = ('label', 'record_id', 'user__email')
    readonly_fields = (
        'user', 'user_role', 'module', 'action', 'record_id', 'label',
        'old_values', 'new_values', 'ip_address', 'user_agent', 'created_at'
    )
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False
