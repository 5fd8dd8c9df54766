from rest_framework import serializers
from .models import Quality, Fabric

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class QualitySerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        error_messages={'required': 'Quality name is required', 'blank': 'Quality name is required'},
    )
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=True)

    class Meta:
        model = Quality
        fields = ['id', 'name', 'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if len(value) < NAME_MIN_LENGTH:
            raise serializers.ValidationError(f'Quality name must be at least {NAME_MIN_LENGTH} characters long')
        if len(value) > NAME_MAX_LENGTH:
            raise serializers.ValidationError(f'Quality name cannot exceed {NAME_MAX_LENGTH} characters')
        duplicates = Quality.objects.filter(name__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('A quality with this name already exists')
        return value

    def validate_description(self, value):
        value = value or ''
        if len(value) > DESCRIPTION_MAX_LENGTH:
            raise serializers.ValidationError(f'Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters')
        return value


class FabricSerializer(serializers.ModelSerializer):
    quality_code = serializers.CharField(
        max_length=50,
        error_messages={
            'required': 'Quality code is required',
            'blank': 'Quality code is required',
            'max_length': 'Quality code cannot exceed 50 characters',
        },
    )
    quality_name = serializers.CharField(
        max_length=100, error_messages={'required': 'Quality name is required', 'blank': 'Quality name is required'},
    )
    weaver = serializers.CharField(
        max_length=100, error_messages={'required': 'Weaver is required', 'blank': 'Weaver is required'},
    )
    weaver_quality_name = serializers.CharField(
        max_length=100,
        error_messages={'required': 'Weaver quality name is required', 'blank': 'Weaver quality name is required'},
    )

    class Meta:
        model = Fabric
        fields = [
            'id', 'quality_code', 'quality_name', 'weaver', 'weaver_quality_name',
            'greigh_width', 'finish_width', 'weight', 'gsm', 'danier', 'reed', 'pick',
            'greigh_rate', 'label', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'label', 'created_at', 'updated_at']

    def validate_quality_code(self, value):
        value = value.strip()
        duplicates = Fabric.objects.filter(quality_code=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError(f'Quality code "{value}" already exists. Please use a different code.')
        return value
