from rest_framework import serializers

from millpanel.core.exceptions import Conflict
from .models import Lab


class AttachmentSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=500)
    file_name = serializers.CharField(
        max_length=200, error_messages={'max_length': 'File name cannot exceed 200 characters'},
    )


class LabSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source='order.order_id', read_only=True)
    quality_name = serializers.CharField(source='order_item.quality.name', read_only=True, default=None)
    lab_send_date = serializers.DateField(
        error_messages={'required': 'Lab send date is required', 'null': 'Lab send date is required'},
    )
    remarks = serializers.CharField(
        max_length=500, required=False, allow_blank=True,
        error_messages={'max_length': 'Remarks cannot exceed 500 characters'},
    )
    status = serializers.ChoiceField(
        choices=Lab.STATUS_CHOICES, required=False,
        error_messages={'invalid_choice': "Status must be either 'sent', 'received', or 'cancelled'"},
    )
    attachments = serializers.ListField(child=AttachmentSerializer(), required=False)

    class Meta:
        model = Lab
        fields = [
            'id', 'order', 'order_number', 'order_item', 'quality_name',
            'lab_send_date', 'approval_date', 'sample_number', 'lab_send_number',
            'status', 'received_date', 'attachments', 'remarks', 'soft_deleted',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'soft_deleted', 'created_at', 'updated_at']
        # One live lab per item is checked in validate()
        validators = []
        extra_kwargs = {
            'order': {'error_messages': {'required': 'Order is required', 'does_not_exist': 'Order not found'}},
            'order_item': {
                'required': True, 'allow_null': False, 'validators': [],
                'error_messages': {'required': 'Order item ID is required', 'does_not_exist': 'Order item not found'},
            },
        }

    def validate(self, attrs):
        order = attrs.get('order', getattr(self.instance, 'order', None))
        order_item = attrs.get('order_item', getattr(self.instance, 'order_item', None))
        if order is not None and order_item is not None and order_item.order_id != order.pk:
            raise serializers.ValidationError('Order item not found')

        if order_item is not None:
            clash = Lab.objects.filter(order_item=order_item, soft_deleted=False)
            if self.instance is not None:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise Conflict('A lab already exists for this order item')

        status = attrs.get('status')
        if status == Lab.STATUS_RECEIVED and not attrs.get('received_date', getattr(self.instance, 'received_date', None)):
            raise serializers.ValidationError('Received date is required when status is received')
        return attrs


class LabRowSerializer(serializers.Serializer):
    """One row of the bulk lab form"""
    order_item = serializers.CharField()
    lab = serializers.IntegerField(required=False, allow_null=True)
    lab_send_date = serializers.DateField(required=False, allow_null=True)
    approval_date = serializers.DateField(required=False, allow_null=True)
    sample_number = serializers.CharField(max_length=100, required=False, allow_blank=True)


class LabSubmitSerializer(serializers.Serializer):
    rows = LabRowSerializer(many=True, allow_empty=True)


class SeedLabsSerializer(serializers.Serializer):
    lab_send_date = serializers.DateField(
        error_messages={'required': 'Lab send date is required', 'null': 'Lab send date is required'},
    )
    prefix = serializers.CharField(max_length=20, required=False, default='LAB-')
    start_index = serializers.IntegerField(min_value=1, required=False, default=1)
    override_existing = serializers.BooleanField(required=False, default=False)


class LabItemSerializer(serializers.Serializer):
    """Lab data of a single order item as edited from the order page"""
    lab_send_date = serializers.DateField(required=False, allow_null=True)
    approval_date = serializers.DateField(required=False, allow_null=True)
    sample_number = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get('lab_send_date') or not attrs.get('sample_number', '').strip():
            raise serializers.ValidationError('Lab Send Date and Sample Number are required')
        return attrs
