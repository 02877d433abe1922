from django.contrib import admin

from .models import Client, FishVariety


@admin.register(FishVariety)
class FishVarietyAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'created_at')
    search_fields = ('code', 'name')


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ('party_name', 'phone', 'gst_type', 'balance_type', 'opening_balance', 'is_active')
    list_filter = ('gst_type', 'balance_type', 'is_active', 'state')
    search_fields = ('party_name', 'phone', 'gstin', 'email')

    fieldsets = (
        ('Party', {'fields': ('party_name', 'party_group', 'phone', 'email', 'is_active')}),
        ('Tax & Address', {'fields': ('gst_type', 'gstin', 'state', 'billing_address')}),
        ('Balance', {'fields': ('opening_balance', 'balance_type', 'credit_limit', 'reference_no')}),
        ('Bank', {'fields': ('account_number', 'ifsc', 'bank_name', 'bank_address', 'payment_details')}),
    )
