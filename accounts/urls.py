from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    AdminUserRoleView,
    CustomTokenObtainPairView,
    LogoutView,
    MeView,
    RegisterView,
    RolePermissionsView,
    TeamMemberDetailView,
    TeamMemberListCreateView,
)

app_name = 'accounts'

urlpatterns = [
    # Authentication endpoints
    path('register/', RegisterView.as_view(), name='register'),
    path('login/', CustomTokenObtainPairView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/', MeView.as_view(), name='me'),
]

# Mounted at /api/team-members/
team_urlpatterns = [
    path('', TeamMemberListCreateView.as_view(), name='team-member-list'),
    path('<uuid:pk>/', TeamMemberDetailView.as_view(), name='team-member-detail'),
]

# Mounted at /api/admin/
admin_urlpatterns = [
    path('users/', AdminUserRoleView.as_view(), name='admin-users'),
]

# Mounted at /api/superadmin/
superadmin_urlpatterns = [
    path('permissions/', RolePermissionsView.as_view(), name='role-permissions'),
]
