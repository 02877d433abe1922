from django.urls import path

from .views import (
    ClientBillAddItemView,
    ClientBillExportView,
    ClientBillItemView,
    ClientBillUpdateTotalView,
    VendorBillAddItemView,
    VendorBillExportView,
    VendorBillItemView,
)

vendor_urlpatterns = [
    path('add-item/', VendorBillAddItemView.as_view(), name='vendor-add-item'),
    path('item/<uuid:pk>/', VendorBillItemView.as_view(), name='vendor-item'),
    path('export/', VendorBillExportView.as_view(), name='vendor-export'),
]

client_urlpatterns = [
    path('item/', ClientBillAddItemView.as_view(), name='client-add-item'),
    path('item/<uuid:pk>/', ClientBillItemView.as_view(), name='client-item'),
    path('update-total/', ClientBillUpdateTotalView.as_view(), name='client-update-total'),
    path('export/', ClientBillExportView.as_view(), name='client-export'),
]
