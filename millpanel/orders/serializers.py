from django.db import transaction
from rest_framework import serializers

from millpanel.catalog.models import Quality
from millpanel.parties.models import Party
from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(required=False)
    quality = serializers.PrimaryKeyRelatedField(
        queryset=Quality.objects.all(), required=False, allow_null=True,
        error_messages={'does_not_exist': 'Quality not found', 'incorrect_type': 'Invalid quality ID format'},
    )
    quality_name = serializers.CharField(source='quality.name', read_only=True, default=None)
    quantity = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=0,
        error_messages={'min_value': 'Quantity cannot be negative', 'invalid': 'Quantity must be a non-negative number'},
    )
    image_url = serializers.CharField(
        max_length=500, required=False, allow_blank=True,
        error_messages={'max_length': 'Image URL cannot exceed 500 characters'},
    )
    description = serializers.CharField(
        max_length=200, required=False, allow_blank=True,
        error_messages={'max_length': 'Description cannot exceed 200 characters'},
    )

    class Meta:
        model = OrderItem
        fields = ['id', 'position', 'quality', 'quality_name', 'quantity', 'image_url', 'description']
        read_only_fields = ['position']


class OrderSerializer(serializers.ModelSerializer):
    order_type = serializers.ChoiceField(
        choices=Order.ORDER_TYPE_CHOICES,
        error_messages={
            'required': "Order type is required and must be either 'Dying' or 'Printing'",
            'invalid_choice': "Order type is required and must be either 'Dying' or 'Printing'",
        },
    )
    arrival_date = serializers.DateField(
        error_messages={'required': 'Arrival date is required', 'null': 'Arrival date is required',
                        'invalid': 'Invalid arrival date format'},
    )
    party = serializers.PrimaryKeyRelatedField(
        queryset=Party.objects.all(),
        error_messages={'required': 'Party is required', 'null': 'Party is required',
                        'does_not_exist': 'Party not found', 'incorrect_type': 'Invalid party ID format'},
    )
    party_name = serializers.CharField(source='party.name', read_only=True)
    contact_name = serializers.CharField(
        max_length=50, required=False, allow_blank=True,
        error_messages={'max_length': 'Contact name cannot exceed 50 characters'},
    )
    contact_phone = serializers.CharField(
        max_length=20, required=False, allow_blank=True,
        error_messages={'max_length': 'Contact phone cannot exceed 20 characters'},
    )
    po_number = serializers.CharField(
        max_length=50, required=False, allow_blank=True,
        error_messages={'max_length': 'PO number cannot exceed 50 characters'},
    )
    style_no = serializers.CharField(
        max_length=50, required=False, allow_blank=True,
        error_messages={'max_length': 'Style number cannot exceed 50 characters'},
    )
    po_date = serializers.DateField(required=False, allow_null=True, error_messages={'invalid': 'Invalid PO date format'})
    delivery_date = serializers.DateField(
        required=False, allow_null=True, error_messages={'invalid': 'Invalid delivery date format'},
    )
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False, allow_null=True, allow_blank=True)
    items = OrderItemSerializer(many=True)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            'id', 'order_id', 'order_type', 'arrival_date', 'party', 'party_name',
            'contact_name', 'contact_phone', 'po_number', 'style_no', 'po_date', 'delivery_date',
            'status', 'items', 'created_by', 'created_by_username', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'order_id', 'created_by', 'created_at', 'updated_at']

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('Order must contain at least one item')
        return value

    def validate_status(self, value):
        return value or None

    def validate(self, attrs):
        party = attrs.get('party', getattr(self.instance, 'party', None))
        po_number = attrs.get('po_number', getattr(self.instance, 'po_number', '')).strip()
        style_no = attrs.get('style_no', getattr(self.instance, 'style_no', '')).strip()
        if party and po_number and style_no:
            duplicates = Order.objects.filter(party=party, po_number=po_number, style_no=style_no)
            if self.instance is not None:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                raise serializers.ValidationError(
                    'An order with this PO number and style number already exists for this party'
                )
        return attrs

    def create(self, validated_data):
        items = validated_data.pop('items')
        with transaction.atomic():
            order = Order.objects.create(**validated_data)
            for position, item in enumerate(items):
                item.pop('id', None)
                OrderItem.objects.create(order=order, position=position, **item)
        return order

    def update(self, instance, validated_data):
        items = validated_data.pop('items', None)
        with transaction.atomic():
            for field, value in validated_data.items():
                setattr(instance, field, value)
            instance.save()
            if items is not None:
                self._sync_items(instance, items)
        return instance

    def _sync_items(self, order, items):
        """Update items that carry a known id, create the rest, drop the ones left out"""
        existing = {item.pk: item for item in order.items.all()}
        kept = set()
        for position, data in enumerate(items):
            item_id = data.pop('id', None)
            item = existing.get(item_id)
            if item is None:
                item = OrderItem(order=order)
            for field, value in data.items():
                setattr(item, field, value)
            item.position = position
            item.save()
            kept.add(item.pk)
        stale = [pk for pk in existing if pk not in kept]
        if stale:
            OrderItem.objects.filter(pk__in=stale).delete()


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=Order.STATUS_CHOICES, allow_null=True, allow_blank=True,
        error_messages={'required': 'Status is required', 'invalid_choice': 'Invalid status'},
    )
