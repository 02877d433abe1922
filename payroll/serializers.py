import re
from datetime import date, datetime

from rest_framework import serializers

from core.uploads import validate_document

from .models import Employee, Salary

MOBILE_RE = re.compile(r'^[6-9]\d{9}$')
AADHAAR_RE = re.compile(r'^[2-9]\d{11}$')
PAN_RE = re.compile(r'^[A-Z]{5}\d{4}[A-Z]$')
IFSC_RE = re.compile(r'^[A-Z]{4}0[A-Z0-9]{6}$')


class EmployeeSerializer(serializers.ModelSerializer):
    """
    Employee create/update. Identity numbers are declared explicitly so that
    duplicates are reported by the service as conflicts, not as field errors.
    """
    aadhaar = serializers.CharField(max_length=12)
    pan = serializers.CharField(max_length=10)
    mobile = serializers.CharField(max_length=10)
    alt_mobile = serializers.CharField(max_length=10, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    account_number = serializers.CharField(max_length=30)
    ifsc = serializers.CharField(max_length=11)

    photo = serializers.FileField(required=False, allow_null=True, validators=[validate_document])
    aadhaar_proof = serializers.FileField(required=False, allow_null=True, validators=[validate_document])
    pan_proof = serializers.FileField(required=False, allow_null=True, validators=[validate_document])

    class Meta:
        model = Employee
        fields = [
            'id', 'employee_id',
            'doj', 'department', 'designation', 'work_location', 'shift_type',
            'basic_salary', 'hra', 'conveyance_allowance', 'special_allowance', 'gross_salary', 'ctc',
            'full_name', 'father_name', 'dob', 'gender', 'marital_status', 'nationality',
            'aadhaar', 'pan', 'mobile', 'alt_mobile', 'email',
            'current_address', 'permanent_address',
            'bank_name', 'branch_name', 'account_number', 'ifsc',
            'photo', 'aadhaar_proof', 'pan_proof',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'employee_id', 'created_at', 'updated_at']

    def validate_mobile(self, value):
        value = value.strip()
        if not MOBILE_RE.match(value):
            raise serializers.ValidationError("Enter a valid 10-digit mobile number")
        return value

    def validate_alt_mobile(self, value):
        value = (value or '').strip()
        if value and not MOBILE_RE.match(value):
            raise serializers.ValidationError("Enter a valid 10-digit mobile number")
        return value

    def validate_aadhaar(self, value):
        value = value.strip()
        if not AADHAAR_RE.match(value):
            raise serializers.ValidationError("Enter a valid 12-digit Aadhaar number")
        return value

    def validate_pan(self, value):
        value = value.strip().upper()
        if not PAN_RE.match(value):
            raise serializers.ValidationError("Enter a valid PAN (e.g. ABCDE1234F)")
        return value

    def validate_ifsc(self, value):
        value = value.strip().upper()
        if not IFSC_RE.match(value):
            raise serializers.ValidationError("Enter a valid IFSC code")
        return value

    def validate_email(self, value):
        return value.strip().lower() if value else None

    def validate_account_number(self, value):
        return value.strip()

    def validate(self, attrs):
        mobile = attrs.get('mobile', getattr(self.instance, 'mobile', None))
        alt_mobile = attrs.get('alt_mobile', getattr(self.instance, 'alt_mobile', ''))
        if alt_mobile and alt_mobile == mobile:
            raise serializers.ValidationError(
                {'alt_mobile': 'Alternate mobile must be different from mobile'}
            )
        return attrs


class EmployeeOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = ['id', 'employee_id', 'full_name', 'email', 'designation']


class EmployeePaymentOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = ['id', 'employee_id', 'full_name', 'email', 'designation', 'gross_salary']


class MonthField(serializers.DateField):
    """Accepts ``YYYY-MM`` or a full date; stores the first day of the month."""
    default_error_messages = {
        'invalid': 'Invalid month format',
    }

    def to_internal_value(self, value):
        if isinstance(value, date):
            return value.replace(day=1)
        value = str(value).strip()
        for fmt in ('%Y-%m', '%Y-%m-%d'):
            try:
                return datetime.strptime(value, fmt).date().replace(day=1)
            except ValueError:
                continue
        self.fail('invalid')

    def to_representation(self, value):
        return value.strftime('%Y-%m') if value else None


class SalarySerializer(serializers.ModelSerializer):
    month = MonthField()
    user_name = serializers.CharField(source='user.display_name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Salary
        fields = ['id', 'user', 'user_name', 'user_email', 'month', 'amount', 'notes', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'notes': {'allow_blank': True},
        }
