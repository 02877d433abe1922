from django.contrib.auth.models import AbstractUser
from django.db import models
import uuid


class User(AbstractUser):
    """
    Back-office user.

    Users sign in with their email address. A user may be linked to the
    payroll record of the employee it was registered for.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class UserRole(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        FINANCE = 'finance', 'Finance'
        CLERK = 'clerk', 'Clerk'
        DOCUMENTATION = 'documentation', 'Documentation'
        SALES = 'sales', 'Sales'
        PARTNER = 'partner', 'Partner'
        SENIOR_EXECUTIVE = 'seniorExecutive', 'Senior Executive'
        JUNIOR_EXECUTIVE = 'juniorExecutive', 'Junior Executive'
        EXECUTIVE = 'executive', 'Executive'
        SUPERVISOR = 'supervisor', 'Supervisor'
        OTHERS = 'others', 'Others'

    email = models.EmailField(unique=True)

    name = models.CharField(max_length=150, blank=True)

    role = models.CharField(
        max_length=30,
        choices=UserRole.choices,
        default=UserRole.OTHERS,
        db_index=True,
        help_text="User's role; drives the permission checks on every endpoint"
    )

    employee = models.OneToOneField(
        'payroll.Employee',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='user',
        help_text="Employee this account was registered for"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['role', 'is_active']),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.get_role_display()})"

    @property
    def display_name(self):
        return self.name or self.get_full_name() or self.email

    @property
    def is_admin_role(self):
        return self.role == self.UserRole.ADMIN


class RolePermission(models.Model):
    """Permission granted to every user holding a role."""

    role = models.CharField(max_length=30, choices=User.UserRole.choices, db_index=True)
    permission = models.CharField(max_length=100)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'role_permissions'
        ordering = ['role', 'permission']
        unique_together = [['role', 'permission']]

    def __str__(self):
        return f"{self.role}: {self.permission}"


class UserPermissionOverride(models.Model):
    """Per-user grant or revocation on top of the role's permissions."""

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='permission_overrides'
    )
    permission = models.CharField(max_length=100)
    allow = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_permission_overrides'
        unique_together = [['user', 'permission']]

    def __str__(self):
        verb = 'allow' if self.allow else 'deny'
        return f"{self.user.email}: {verb} {self.permission}"
