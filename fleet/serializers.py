from rest_framework import serializers

from core.uploads import validate_document

from .models import Driver, FuelType, Vehicle

OWN_FIELDS = [
    'manufacturer', 'model', 'year_of_manufacture', 'fuel_type',
    'engine_number', 'chassis_number', 'capacity_in_tons', 'body_type',
    'rc_validity', 'insurance_expiry', 'fitness_expiry',
    'pollution_expiry', 'permit_expiry', 'road_tax_expiry',
]
RENT_FIELDS = ['rental_agency', 'rental_rate_per_day']


class DriverBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Driver
        fields = ['id', 'name', 'phone']


class VehicleBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehicle
        fields = ['id', 'vehicle_number']


class VehicleWriteSerializer(serializers.ModelSerializer):
    """
    Shared vehicle input. The vehicle number and driver are declared
    explicitly; uniqueness is checked by ``VehicleService``.
    """
    vehicle_number = serializers.CharField(
        max_length=20,
        error_messages={'required': 'Vehicle number is required', 'blank': 'Vehicle number is required'}
    )
    assigned_driver = serializers.PrimaryKeyRelatedField(
        queryset=Driver.objects.all(),
        required=False,
        allow_null=True
    )

    def validate_vehicle_number(self, value):
        return value.strip().upper()


class OwnVehicleSerializer(VehicleWriteSerializer):
    fuel_type = serializers.ChoiceField(
        choices=FuelType.choices,
        error_messages={'required': 'Fuel type is required'}
    )

    class Meta:
        model = Vehicle
        fields = ['vehicle_number', *OWN_FIELDS, 'assigned_driver', 'remarks']


class RentVehicleSerializer(VehicleWriteSerializer):
    rental_agency = serializers.CharField(
        max_length=150,
        error_messages={'required': 'Rental agency is required', 'blank': 'Rental agency is required'}
    )
    rental_rate_per_day = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        error_messages={'required': 'Rental rate per day is required'}
    )

    class Meta:
        model = Vehicle
        fields = ['vehicle_number', *RENT_FIELDS, 'assigned_driver', 'remarks']


class VehicleSerializer(serializers.ModelSerializer):
    assigned_driver = DriverBriefSerializer(read_only=True)
    ownership_display = serializers.CharField(source='get_ownership_display', read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            'id', 'vehicle_number', 'ownership', 'ownership_display',
            *OWN_FIELDS, *RENT_FIELDS,
            'assigned_driver', 'remarks', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OwnVehicleListSerializer(VehicleSerializer):
    class Meta(VehicleSerializer.Meta):
        fields = [
            'id', 'vehicle_number', 'ownership', *OWN_FIELDS,
            'assigned_driver', 'remarks', 'created_at', 'updated_at',
        ]


class RentVehicleListSerializer(VehicleSerializer):
    class Meta(VehicleSerializer.Meta):
        fields = [
            'id', 'vehicle_number', 'ownership', *RENT_FIELDS,
            'assigned_driver', 'remarks', 'created_at', 'updated_at',
        ]


class DriverSerializer(serializers.ModelSerializer):
    """Driver create/update; identity numbers are checked by ``DriverService``."""
    phone = serializers.CharField(max_length=15)
    license_number = serializers.CharField(max_length=50)
    aadhar_number = serializers.CharField(max_length=12)
    identity_proof = serializers.FileField(required=False, allow_null=True, validators=[validate_document])
    remove_identity_proof = serializers.BooleanField(required=False, default=False, write_only=True)
    assigned_vehicle = serializers.SerializerMethodField()

    class Meta:
        model = Driver
        fields = [
            'id', 'name', 'phone', 'license_number', 'address', 'age',
            'aadhar_number', 'identity_proof', 'remove_identity_proof',
            'assigned_vehicle', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'is_active', 'created_at', 'updated_at']

    def get_assigned_vehicle(self, obj):
        vehicle = Vehicle.objects.filter(assigned_driver=obj).first()
        return VehicleBriefSerializer(vehicle).data if vehicle is not None else None

    def validate_aadhar_number(self, value):
        value = value.strip()
        if not (value.isdigit() and len(value) == 12):
            raise serializers.ValidationError("Aadhar number must be 12 digits")
        return value

    def validate_age(self, value):
        if value < 18:
            raise serializers.ValidationError("Driver must be at least 18 years old")
        return value


class AssignDriverSerializer(serializers.Serializer):
    vehicle_id = serializers.UUIDField(required=False)
    driver_id = serializers.UUIDField(required=False)


class MarkAvailableSerializer(serializers.Serializer):
    vehicle_id = serializers.UUIDField(error_messages={'required': 'vehicle_id is required'})
