from django.utils import timezone
from rest_framework import serializers

from millpanel.orders.models import Order


class DashboardOrderSerializer(serializers.ModelSerializer):
    """Compact order row for the dashboard tables"""
    party_name = serializers.CharField(source='party.name', read_only=True)
    status = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_id', 'order_type', 'status', 'party', 'party_name', 'po_number',
            'style_no', 'arrival_date', 'delivery_date', 'created_at'
        ]

    def get_status(self, obj):
        return obj.status or 'not_set'


class UpcomingDeliverySerializer(DashboardOrderSerializer):
    days_until_delivery = serializers.SerializerMethodField()

    class Meta(DashboardOrderSerializer.Meta):
        fields = DashboardOrderSerializer.Meta.fields + ['days_until_delivery']

    def get_days_until_delivery(self, obj):
        """Whole days left until delivery, 0 once the date has passed"""
        today = self.context.get('today') or timezone.localdate()
        return max(0, (obj.delivery_date - today).days)
