from django.urls import path

from .views import ClientPaymentListCreateView, EmployeePaymentListCreateView, VendorPaymentListCreateView

app_name = 'payments'

urlpatterns = [
    path('client/', ClientPaymentListCreateView.as_view(), name='client-payments'),
    path('vendor/', VendorPaymentListCreateView.as_view(), name='vendor-payments'),
    path('employee/', EmployeePaymentListCreateView.as_view(), name='employee-payments'),
]
