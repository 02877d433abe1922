from django.contrib import admin

from .models import Employee, Salary


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ('employee_id', 'full_name', 'designation', 'department', 'mobile', 'doj')
    list_filter = ('department', 'designation', 'gender')
    search_fields = ('employee_id', 'full_name', 'mobile', 'email', 'aadhaar', 'pan')
    readonly_fields = ('employee_id', 'created_at', 'updated_at')

    fieldsets = (
        ('Employment', {'fields': ('employee_id', 'doj', 'department', 'designation', 'work_location', 'shift_type')}),
        ('Salary', {'fields': ('basic_salary', 'hra', 'conveyance_allowance', 'special_allowance', 'gross_salary', 'ctc')}),
        ('Personal', {'fields': (
            'full_name', 'father_name', 'dob', 'gender', 'marital_status', 'nationality',
            'aadhaar', 'pan', 'mobile', 'alt_mobile', 'email', 'current_address', 'permanent_address',
        )}),
        ('Bank', {'fields': ('bank_name', 'branch_name', 'account_number', 'ifsc')}),
        ('Documents', {'fields': ('photo', 'aadhaar_proof', 'pan_proof')}),
    )


@admin.register(Salary)
class SalaryAdmin(admin.ModelAdmin):
    list_display = ('user', 'month', 'amount', 'created_at')
    list_filter = ('month',)
    search_fields = ('user__email', 'user__name')
