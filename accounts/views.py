"""
Authentication, team management and role administration.

API Endpoints:
- /api/auth/login/ - Email + password login (JWT)
- /api/auth/token/refresh/ - Refresh an access token
- /api/auth/logout/ - Blacklist a refresh token
- /api/auth/register/ - Register an account for an existing employee
- /api/auth/me/ - Signed-in user summary
- /api/team-members/ - List/create team members
- /api/team-members/{id}/ - Update/delete a team member
- /api/admin/users/ - List users, change a user's role
- /api/superadmin/permissions/ - Read/replace role permissions
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from audit.services import AuditLogger
from payroll.models import Employee

from .permissions import HasAppPermission, IsAdminRole
from .serializers import (
    CustomTokenObtainPairSerializer,
    MeSerializer,
    RegisterSerializer,
    RolePermissionsSerializer,
    RoleUpdateSerializer,
    TeamMemberCreateSerializer,
    TeamMemberUpdateSerializer,
    UserSerializer,
)
from .services import (
    RoleError,
    get_user_permissions,
    map_designation_to_role,
    permissions_by_role,
    replace_role_permissions,
)

User = get_user_model()

logger = logging.getLogger(__name__)


# =============================================================================
# AUTHENTICATION
# =============================================================================

class CustomTokenObtainPairView(TokenObtainPairView):
    """
    POST /api/auth/login/

    JWT login with the user's email address.
    """
    serializer_class = CustomTokenObtainPairSerializer


class LogoutView(APIView):
    """
    POST /api/auth/logout/

    Blacklists the refresh token.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh_token')
        if not refresh_token:
            return Response(
                {'error': 'Refresh token is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'message': 'Logout successful'}, status=status.HTTP_200_OK)


class RegisterView(APIView):
    """
    POST /api/auth/register/

    Creates a login for an existing employee. The role is derived from the
    employee's designation, so only team managers may register employees.
    """
    permission_classes = [HasAppPermission]
    required_permission = 'teams.view'

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        email = data.get('email')
        password = data.get('password')
        employee_id = data.get('employee_id')
        if not email or not password or not employee_id:
            return Response(
                {'error': 'email, password and employee_id are required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        employee = Employee.objects.filter(pk=employee_id).first()
        if employee is None:
            return Response({'error': 'Employee not found'}, status=status.HTTP_404_NOT_FOUND)

        if User.objects.filter(email__iexact=email).exists():
            return Response({'error': 'Email already registered'}, status=status.HTTP_409_CONFLICT)

        if User.objects.filter(employee=employee).exists():
            return Response(
                {'error': 'Employee already has an account'},
                status=status.HTTP_409_CONFLICT
            )

        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            name=employee.full_name,
            role=map_designation_to_role(employee.designation),
            employee=employee,
        )
        logger.info(f"Registered user {user.email} for employee {employee.employee_id}")

        return Response({
            'message': 'User registered successfully',
            'user': {
                'id': str(user.id),
                'email': user.email,
                'role': user.role,
                'employee_id': str(employee.id),
            }
        }, status=status.HTTP_201_CREATED)


class MeView(APIView):
    """
    GET /api/auth/me/

    Signed-in user with the effective permission list.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        data = MeSerializer(request.user).data
        data['permissions'] = get_user_permissions(request.user)
        return Response({'user': data})


# =============================================================================
# TEAM MEMBERS
# =============================================================================

class TeamMemberListCreateView(generics.ListCreateAPIView):
    """
    GET /api/team-members/
    POST /api/team-members/
    """
    queryset = User.objects.select_related('employee').order_by('-created_at')
    serializer_class = UserSerializer
    permission_classes = [HasAppPermission]
    required_permission = 'teams.view'
    search_fields = ['email', 'name']

    def create(self, request, *args, **kwargs):
        serializer = TeamMemberCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if not all(data.get(field) for field in ('email', 'password', 'name', 'role')):
            return Response(
                {'error': 'Required Fields are missing'},
                status=status.HTTP_400_BAD_REQUEST
            )

        if User.objects.filter(email__iexact=data['email']).exists():
            return Response({'error': 'Email already exists'}, status=status.HTTP_409_CONFLICT)

        user = User.objects.create_user(
            username=data['email'],
            email=data['email'],
            password=data['password'],
            name=data['name'],
            role=data['role'],
        )

        AuditLogger.from_request(request).log(
            module='Team Members',
            action='CREATE',
            record_id=user.id,
            new_values={'email': user.email, 'name': user.name, 'role': user.role},
            label=f"Team member created: {user.email}",
        )

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class TeamMemberDetailView(APIView):
    """
    GET/PUT/PATCH/DELETE /api/team-members/{id}/
    """
    permission_classes = [HasAppPermission]
    required_permission = 'teams.view'

    def get_object(self, pk):
        return User.objects.filter(pk=pk).first()

    def get(self, request, pk):
        user = self.get_object(pk)
        if user is None:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(UserSerializer(user).data)

    def put(self, request, pk):
        user = self.get_object(pk)
        if user is None:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = TeamMemberUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if not data:
            return Response({'error': 'Nothing to update'}, status=status.HTTP_400_BAD_REQUEST)

        email = data.get('email')
        if email and User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
            return Response({'error': 'Email already in use'}, status=status.HTTP_409_CONFLICT)

        old_values = {'email': user.email, 'name': user.name, 'role': user.role, 'is_active': user.is_active}

        if email:
            user.email = email
            user.username = email
        for field in ('name', 'role', 'is_active'):
            if field in data:
                setattr(user, field, data[field])
        if data.get('password'):
            user.set_password(data['password'])
        user.save()

        AuditLogger.from_request(request).log_change(
            module='Team Members',
            record_id=user.id,
            old_values=old_values,
            new_values={'email': user.email, 'name': user.name, 'role': user.role, 'is_active': user.is_active},
            label=f"Team member updated: {user.email}",
        )

        return Response(UserSerializer(user).data)

    patch = put

    def delete(self, request, pk):
        user = self.get_object(pk)
        if user is None:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)
        if user.pk == request.user.pk:
            return Response(
                {'error': 'You cannot delete your own account'},
                status=status.HTTP_400_BAD_REQUEST
            )

        email = user.email
        user.delete()
        AuditLogger.from_request(request).log(
            module='Team Members',
            action='DELETE',
            record_id=pk,
            old_values={'email': email},
            label=f"Team member deleted: {email}",
        )
        return Response({'message': 'User deleted successfully'})


# =============================================================================
# ROLE ADMINISTRATION
# =============================================================================

class AdminUserRoleView(APIView):
    """
    GET /api/admin/users/ - every user with their role
    PUT /api/admin/users/ - {"user_id", "role"} changes a user's role
    """
    permission_classes = [HasAppPermission]
    required_permission = 'teams.view'

    def get(self, request):
        users = User.objects.select_related('employee').order_by('email')
        return Response(UserSerializer(users, many=True).data)

    def put(self, request):
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user_id = serializer.validated_data.get('user_id')
        role = serializer.validated_data.get('role')
        if not user_id or not role:
            return Response({'error': 'Missing data'}, status=status.HTTP_400_BAD_REQUEST)

        user = User.objects.filter(pk=user_id).first()
        if user is None:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

        old_role = user.role
        user.role = role
        user.save(update_fields=['role', 'updated_at'])

        AuditLogger.from_request(request).log_change(
            module='User Roles',
            record_id=user.id,
            old_values={'role': old_role},
            new_values={'role': role},
            label=f"Role changed for {user.email}",
        )

        return Response(UserSerializer(user).data)


class RolePermissionsView(APIView):
    """
    GET /api/superadmin/permissions/ - permissions grouped by role
    POST /api/superadmin/permissions/ - {"role", "permissions"} replaces a role's set
    """
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(permissions_by_role())

    def post(self, request):
        serializer = RolePermissionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        role = serializer.validated_data.get('role')
        if not role:
            return Response({'error': 'Missing role'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            with transaction.atomic():
                granted = replace_role_permissions(role, serializer.validated_data['permissions'])
        except RoleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'role': role, 'permissions': granted})
