from decimal import Decimal
from django.contrib.auth import get_user_model
from rest_framework import serializers
from apps.users.serializers import PublicUserSerializer
from .models import Job, JobLog, Review

User = get_user_model()


class JobSerializer(serializers.ModelSerializer):
    customer = PublicUserSerializer(read_only=True)
    worker = PublicUserSerializer(read_only=True)

    class Meta:
        model = Job
        fields = [
            'id', 'customer', 'worker', 'description', 'details', 'location',
            'scheduled_at', 'charge', 'status',
            'start_proof_photo', 'start_proof_gps_lat', 'start_proof_gps_lng', 'started_at',
            'payment_gateway_order_id', 'payment_status', 'payment_id',
            'platform_fee', 'worker_earnings', 'completed_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class JobCreateSerializer(serializers.Serializer):
    worker_id = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(role='WORKER'), source='worker')
    description = serializers.CharField(max_length=2000)
    details = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    location = serializers.CharField(max_length=255)
    scheduled_at = serializers.DateTimeField()
    charge = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))

    def validate(self, data):
        request = self.context.get('request')
        if request and data['worker'].pk == request.user.pk:
            raise serializers.ValidationError("You cannot book yourself.")
        if not data.get('details'):
            data['details'] = None
        return data


class JobLogSerializer(serializers.ModelSerializer):
    performed_by = PublicUserSerializer(read_only=True)

    class Meta:
        model = JobLog
        fields = ['id', 'from_status', 'to_status', 'action', 'performed_by', 'metadata', 'created_at']
        read_only_fields = fields


class PaymentOrderSerializer(serializers.Serializer):
    orderId = serializers.CharField(source='order_id')
    amount = serializers.IntegerField()
    currency = serializers.CharField()
    keyId = serializers.CharField(source='key_id')


class ReviewSerializer(serializers.ModelSerializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)

    class Meta:
        model = Review
        fields = ['id', 'job', 'worker', 'rating', 'comment', 'created_at']
        read_only_fields = ['job', 'worker', 'created_at']

    def validate_comment(self, value):
        if value is None:
            return None
        return value.strip() or None
