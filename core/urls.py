"""
URL configuration for the Fisheries Trading Back-Office.

Every business area lives in its own app and is mounted under ``/api/``.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

from accounts.urls import admin_urlpatterns as accounts_admin_urls
from accounts.urls import team_urlpatterns as accounts_team_urls
from accounts.urls import superadmin_urlpatterns as accounts_superadmin_urls
from billing.urls import vendor_urlpatterns as vendor_bill_urls
from billing.urls import client_urlpatterns as client_bill_urls
from loadings.urls import stock_urlpatterns as stock_urls

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/team-members/', include((accounts_team_urls, 'team_members'))),
    path('api/admin/', include((accounts_admin_urls, 'accounts_admin'))),
    path('api/superadmin/', include((accounts_superadmin_urls, 'superadmin'))),
    path('api/audit-logs/', include('audit.urls')),
    path('api/', include('parties.urls')),  # Clients and fish varieties
    path('api/loadings/', include('loadings.urls')),
    path('api/stocks/', include((stock_urls, 'stocks'))),
    path('api/vendor-bills/', include((vendor_bill_urls, 'vendor_bills'))),
    path('api/client-bills/', include((client_bill_urls, 'client_bills'))),
    path('api/payments/', include('payments.urls')),
    path('api/payments/', include('charges.urls')),  # Dispatch charges and packing amounts
    path('api/', include('payroll.urls')),  # Employees and salaries
    path('api/', include('fleet.urls')),  # Vehicles and drivers
    path('api/invoices/', include('invoices.urls')),
    path('api/dashboard/', include('dashboards.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
