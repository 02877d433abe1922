from django.contrib import admin

from .models import (
    AgentLoading,
    AgentLoadingItem,
    ClientLoading,
    ClientLoadingItem,
    FarmerLoading,
    FarmerLoadingItem,
)

LOADING_LIST_DISPLAY = ('bill_no', 'date', 'vehicle_no', 'trip_status', 'total_kgs', 'grand_total')
LOADING_READONLY = (
    'total_trays', 'total_loose_kgs', 'total_tray_kgs', 'total_kgs',
    'total_price', 'dispatch_charges_total', 'packing_amount_total', 'grand_total',
    'created_at', 'updated_at',
)


class FarmerLoadingItemInline(admin.TabularInline):
    model = FarmerLoadingItem
    extra = 0
    readonly_fields = ('tray_kgs', 'total_kgs', 'total_price')


class AgentLoadingItemInline(admin.TabularInline):
    model = AgentLoadingItem
    extra = 0
    readonly_fields = ('tray_kgs', 'total_kgs', 'total_price')


class ClientLoadingItemInline(admin.TabularInline):
    model = ClientLoadingItem
    extra = 0
    readonly_fields = ('tray_kgs', 'total_kgs', 'total_price')


@admin.register(FarmerLoading)
class FarmerLoadingAdmin(admin.ModelAdmin):
    list_display = ('farmer_name',) + LOADING_LIST_DISPLAY
    list_filter = ('trip_status', 'date')
    search_fields = ('bill_no', 'farmer_name', 'village')
    readonly_fields = LOADING_READONLY
    inlines = [FarmerLoadingItemInline]


@admin.register(AgentLoading)
class AgentLoadingAdmin(admin.ModelAdmin):
    list_display = ('agent_name',) + LOADING_LIST_DISPLAY
    list_filter = ('trip_status', 'date')
    search_fields = ('bill_no', 'agent_name', 'village')
    readonly_fields = LOADING_READONLY
    inlines = [AgentLoadingItemInline]


@admin.register(ClientLoading)
class ClientLoadingAdmin(admin.ModelAdmin):
    list_display = ('client_name',) + LOADING_LIST_DISPLAY
    list_filter = ('trip_status', 'date')
    search_fields = ('bill_no', 'client_name', 'village')
    readonly_fields = LOADING_READONLY
    inlines = [ClientLoadingItemInline]
