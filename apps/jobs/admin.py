from django.contrib import admin
from .models import Job, JobLog, Review


class JobLogInline(admin.TabularInline):
    model = JobLog
    extra = 0
    can_delete = False
    readonly_fields = ('from_status', 'to_status', 'action', 'performed_by', 'metadata', 'created_at')

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer', 'worker', 'status', 'charge', 'payment_status', 'created_at')
    list_filter = ('status', 'payment_status')
    search_fields = ('customer__username', 'worker__username', 'payment_gateway_order_id')
    readonly_fields = (
        'status', 'start_proof_photo', 'start_proof_gps_lat', 'start_proof_gps_lng', 'started_at',
        'payment_gateway_order_id', 'payment_status', 'payment_id', 'platform_fee',
        'worker_earnings', 'completed_at',
    )
    inlines = [JobLogInline]


@admin.register(JobLog)
class JobLogAdmin(admin.ModelAdmin):
    list_display = ('job', 'action', 'from_status', 'to_status', 'performed_by', 'created_at')
    list_filter = ('action',)
    search_fields = ('job__id', 'performed_by__username')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('job', 'worker', 'customer', 'rating', 'created_at')
    list_filter = ('rating',)
    search_fields = ('worker__username', 'customer__username')
