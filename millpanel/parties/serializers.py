from rest_framework import serializers
from .models import Party


class PartySerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        max_length=100,
        error_messages={
            'required': 'Party name is required',
            'blank': 'Party name is required',
            'max_length': 'Party name cannot exceed 100 characters',
        },
    )
    contact_name = serializers.CharField(
        max_length=50, required=False, allow_blank=True,
        error_messages={'max_length': 'Contact name cannot exceed 50 characters'},
    )
    contact_phone = serializers.CharField(
        max_length=20, required=False, allow_blank=True,
        error_messages={'max_length': 'Contact phone cannot exceed 20 characters'},
    )

    class Meta:
        model = Party
        fields = ['id', 'name', 'contact_name', 'contact_phone', 'address', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError('Party name must be at least 2 characters long')
        return value
