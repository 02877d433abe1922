from django.urls import path

from .views import DispatchChargeView, PackingAmountListCreateView

app_name = 'charges'

urlpatterns = [
    path('dispatch/', DispatchChargeView.as_view(), name='dispatch-charges'),
    path('packing-amount/', PackingAmountListCreateView.as_view(), name='packing-amounts'),
]
