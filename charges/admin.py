from django.contrib import admin

from .models import DispatchCharge, PackingAmount


@admin.register(DispatchCharge)
class DispatchChargeAdmin(admin.ModelAdmin):
    list_display = ('type', 'amount', 'label', 'source_type', 'source_record_id', 'created_at')
    list_filter = ('type', 'source_type')
    search_fields = ('label', 'notes')
    raw_id_fields = ('farmer_loading', 'agent_loading', 'client_loading')


@admin.register(PackingAmount)
class PackingAmountAdmin(admin.ModelAdmin):
    list_display = ('bill_no', 'mode', 'workers', 'total_amount', 'payment_mode', 'source_type', 'created_at')
    list_filter = ('mode', 'payment_mode', 'source_type')
    search_fields = ('bill_no', 'reference')
    readonly_fields = ('bill_no',)
    raw_id_fields = ('farmer_loading', 'agent_loading', 'client_loading')
