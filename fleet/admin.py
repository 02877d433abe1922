from django.contrib import admin

from .models import Driver, Vehicle


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ('vehicle_number', 'ownership', 'fuel_type', 'rental_agency', 'assigned_driver', 'created_at')
    list_filter = ('ownership', 'fuel_type')
    search_fields = ('vehicle_number', 'manufacturer', 'rental_agency')
    raw_id_fields = ('assigned_driver',)


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'license_number', 'age', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name', 'phone', 'license_number', 'aadhar_number')
