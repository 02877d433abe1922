from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .permissions_config import get_all_permission_codenames

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for user details.
    Used by team-member and admin user listings.
    """
    role_display = serializers.CharField(source='get_role_display', read_only=True)
    employee_code = serializers.CharField(
        source='employee.employee_id', read_only=True, allow_null=True
    )

    class Meta:
        model = User
        fields = (
            'id', 'email', 'name', 'role', 'role_display', 'employee',
            'employee_code', 'is_active', 'created_at', 'updated_at'
        )
        read_only_fields = (
            'id', 'role_display', 'employee', 'employee_code',
            'created_at', 'updated_at'
        )


class MeSerializer(serializers.ModelSerializer):
    """Signed-in user summary; name, photo and designation come from the employee record."""
    name = serializers.SerializerMethodField()
    photo = serializers.SerializerMethodField()
    designation = serializers.CharField(
        source='employee.designation', read_only=True, allow_null=True
    )

    class Meta:
        model = User
        fields = ('id', 'email', 'role', 'name', 'photo', 'designation')

    def get_name(self, obj):
        if obj.employee_id:
            return obj.employee.full_name
        return obj.display_name

    def get_photo(self, obj):
        if obj.employee_id and obj.employee.photo:
            return obj.employee.photo.url
        return None


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT login with email and password; the response carries a user summary.
    """
    def validate(self, attrs):
        data = super().validate(attrs)

        data['user'] = {
            'id': str(self.user.id),
            'email': self.user.email,
            'name': self.user.display_name,
            'role': self.user.role,
        }

        return data


class RegisterSerializer(serializers.Serializer):
    """Login creation for an existing employee."""
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    employee_id = serializers.UUIDField(required=False, allow_null=True)


class TeamMemberCreateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    name = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=User.UserRole.choices, required=False)


class TeamMemberUpdateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    password = serializers.CharField(required=False, write_only=True)
    name = serializers.CharField(required=False)
    role = serializers.ChoiceField(choices=User.UserRole.choices, required=False)
    is_active = serializers.BooleanField(required=False)


class RoleUpdateSerializer(serializers.Serializer):
    user_id = serializers.UUIDField(required=False, allow_null=True)
    role = serializers.ChoiceField(choices=User.UserRole.choices, required=False)


class RolePermissionsSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.UserRole.choices, required=False)
    permissions = serializers.ListField(
        child=serializers.CharField(),
        required=False,
        default=list,
    )

    def validate_permissions(self, value):
        known = set(get_all_permission_codenames())
        unknown = [p for p in value if p not in known]
        if unknown:
            raise serializers.ValidationError(
                f"Unknown permissions: {', '.join(unknown)}"
            )
        return value
