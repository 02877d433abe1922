from django.contrib import admin

from .models import ClientPayment, EmployeePayment, VendorPayment


@admin.register(ClientPayment)
class ClientPaymentAdmin(admin.ModelAdmin):
    list_display = ('client_name', 'date', 'amount', 'payment_mode', 'is_installment')
    list_filter = ('payment_mode', 'is_installment')
    search_fields = ('client_name', 'reference')
    raw_id_fields = ('client_loading',)


@admin.register(VendorPayment)
class VendorPaymentAdmin(admin.ModelAdmin):
    list_display = ('vendor_name', 'source', 'date', 'amount', 'payment_mode', 'is_installment')
    list_filter = ('source', 'payment_mode', 'is_installment')
    search_fields = ('vendor_name', 'vendor_key', 'reference_no')


@admin.register(EmployeePayment)
class EmployeePaymentAdmin(admin.ModelAdmin):
    list_display = ('employee_name', 'salary_month', 'date', 'amount', 'payment_mode')
    list_filter = ('salary_month', 'payment_mode')
    search_fields = ('employee_name', 'reference')
    raw_id_fields = ('employee',)
