from django.urls import path

from .views import (
    EmployeeAvailableForPaymentView,
    EmployeeDetailView,
    EmployeeDropDownView,
    EmployeeListCreateView,
    SalaryDetailView,
    SalaryListCreateView,
)

app_name = 'payroll'

urlpatterns = [
    # =========================================================================
    # EMPLOYEES
    # =========================================================================
    path('employees/', EmployeeListCreateView.as_view(), name='employee-list'),
    path('employees/drop-down/', EmployeeDropDownView.as_view(), name='employee-drop-down'),
    path(
        'employees/available-for-payment/',
        EmployeeAvailableForPaymentView.as_view(),
        name='employee-available-for-payment'
    ),
    path('employees/<uuid:pk>/', EmployeeDetailView.as_view(), name='employee-detail'),

    # =========================================================================
    # SALARIES
    # =========================================================================
    path('salaries/', SalaryListCreateView.as_view(), name='salary-list'),
    path('salaries/<uuid:pk>/', SalaryDetailView.as_view(), name='salary-detail'),
]
