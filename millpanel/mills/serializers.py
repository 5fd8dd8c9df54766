from rest_framework import serializers

from millpanel.catalog.models import Quality
from millpanel.orders.models import Order
from .models import Mill, MillInput, MillOutput, Dispatch


def order_field():
    """Orders are referenced by their human-readable id, e.g. ORD-07"""
    return serializers.SlugRelatedField(
        slug_field='order_id', queryset=Order.objects.all(),
        error_messages={'required': 'Order ID is required', 'null': 'Order ID is required',
                        'does_not_exist': 'Order not found'},
    )


def quality_field():
    return serializers.PrimaryKeyRelatedField(
        queryset=Quality.objects.all(), required=False, allow_null=True,
        error_messages={'does_not_exist': 'Quality not found'},
    )


class MillSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        max_length=100,
        error_messages={'required': 'Mill name is required', 'blank': 'Mill name is required',
                        'max_length': 'Mill name cannot exceed 100 characters'},
    )
    contact_person = serializers.CharField(
        max_length=50, required=False, allow_blank=True,
        error_messages={'max_length': 'Contact person name cannot exceed 50 characters'},
    )
    contact_phone = serializers.CharField(
        max_length=20, required=False, allow_blank=True,
        error_messages={'max_length': 'Contact phone cannot exceed 20 characters'},
    )
    address = serializers.CharField(
        max_length=200, required=False, allow_blank=True,
        error_messages={'max_length': 'Address cannot exceed 200 characters'},
    )
    email = serializers.EmailField(
        max_length=100, required=False, allow_blank=True,
        error_messages={'max_length': 'Email cannot exceed 100 characters', 'invalid': 'Enter a valid email address'},
    )

    class Meta:
        model = Mill
        fields = ['id', 'name', 'contact_person', 'contact_phone', 'address', 'email', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        duplicates = Mill.objects.filter(name__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('Mill with this name already exists')
        return value

    def validate_email(self, value):
        return value.strip().lower()


class AdditionalMeterSerializer(serializers.Serializer):
    greigh_mtr = serializers.FloatField(
        min_value=0,
        error_messages={'required': 'Additional greigh meters is required',
                        'min_value': 'Additional greigh meters cannot be negative'},
    )
    pcs = serializers.IntegerField(
        min_value=1,
        error_messages={'required': 'Additional pieces is required',
                        'min_value': 'Additional pieces must be at least 1'},
    )
    quality = serializers.IntegerField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=200, required=False, allow_blank=True)

    def validate_quality(self, value):
        if value is not None and not Quality.objects.filter(pk=value).exists():
            raise serializers.ValidationError('Quality not found')
        return value


class MillInputSerializer(serializers.ModelSerializer):
    order = order_field()
    order_pk = serializers.IntegerField(source='order.pk', read_only=True)
    mill = serializers.PrimaryKeyRelatedField(
        queryset=Mill.objects.all(),
        error_messages={'required': 'Mill reference is required', 'does_not_exist': 'Mill not found'},
    )
    mill_name = serializers.CharField(source='mill.name', read_only=True)
    mill_date = serializers.DateField(error_messages={'required': 'Mill date is required'})
    chalan_no = serializers.CharField(
        max_length=50,
        error_messages={'required': 'Chalan number is required', 'blank': 'Chalan number is required',
                        'max_length': 'Chalan number cannot exceed 50 characters'},
    )
    greigh_mtr = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0,
        error_messages={'required': 'Greigh meters is required', 'min_value': 'Greigh meters cannot be negative'},
    )
    pcs = serializers.IntegerField(
        min_value=1,
        error_messages={'required': 'Number of pieces is required', 'min_value': 'Number of pieces must be at least 1'},
    )
    quality = quality_field()
    quality_name = serializers.CharField(source='quality.name', read_only=True, default=None)
    additional_meters = serializers.ListField(child=AdditionalMeterSerializer(), required=False)
    notes = serializers.CharField(
        max_length=500, required=False, allow_blank=True,
        error_messages={'max_length': 'Notes cannot exceed 500 characters'},
    )
    total_greigh_mtr = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    total_pcs = serializers.IntegerField(read_only=True)

    class Meta:
        model = MillInput
        fields = [
            'id', 'order', 'order_pk', 'mill', 'mill_name', 'mill_date', 'chalan_no',
            'greigh_mtr', 'pcs', 'quality', 'quality_name', 'additional_meters', 'notes',
            'total_greigh_mtr', 'total_pcs', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_additional_meters(self, value):
        return [dict(row) for row in value]


class MillOutputSerializer(serializers.ModelSerializer):
    order = order_field()
    order_pk = serializers.IntegerField(source='order.pk', read_only=True)
    recd_date = serializers.DateField(error_messages={'required': 'All fields are required'})
    mill_bill_no = serializers.CharField(
        max_length=50,
        error_messages={'required': 'All fields are required', 'blank': 'All fields are required',
                        'max_length': 'Mill bill number cannot exceed 50 characters'},
    )
    finished_mtr = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0,
        error_messages={'required': 'All fields are required',
                        'invalid': 'Finished meters must be a valid positive number',
                        'min_value': 'Finished meters must be a valid positive number'},
    )
    mill_rate = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0,
        error_messages={'required': 'All fields are required',
                        'invalid': 'Mill rate must be a valid positive number',
                        'min_value': 'Mill rate must be a valid positive number'},
    )
    quality = quality_field()
    quality_name = serializers.CharField(source='quality.name', read_only=True, default=None)
    amount = serializers.DecimalField(max_digits=24, decimal_places=2, read_only=True)

    class Meta:
        model = MillOutput
        fields = [
            'id', 'order', 'order_pk', 'recd_date', 'mill_bill_no', 'finished_mtr', 'mill_rate',
            'quality', 'quality_name', 'amount', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class DispatchSerializer(serializers.ModelSerializer):
    order = order_field()
    order_pk = serializers.IntegerField(source='order.pk', read_only=True)
    party_name = serializers.CharField(source='order.party.name', read_only=True)
    bill_no = serializers.CharField(
        max_length=50,
        error_messages={'required': 'Bill number is required', 'blank': 'Bill number is required'},
    )
    finish_mtr = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0,
        error_messages={'min_value': 'Finished meters cannot be negative'},
    )
    sale_rate = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0,
        error_messages={'min_value': 'Sale rate cannot be negative'},
    )

    class Meta:
        model = Dispatch
        fields = [
            'id', 'order', 'order_pk', 'party_name', 'dispatch_date', 'bill_no',
            'finish_mtr', 'sale_rate', 'total_value', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'total_value', 'created_at', 'updated_at']
