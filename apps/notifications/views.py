import math
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from .models import Notification
from .serializers import NotificationSerializer

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _positive_int(value, default, maximum=None):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        return min(number, maximum)
    return number


class NotificationListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List the authenticated user's notifications, newest first.",
        manual_parameters=[
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, default=1),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, default=DEFAULT_PAGE_SIZE),
            openapi.Parameter('unreadOnly', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN, default=False),
        ],
        responses={200: NotificationSerializer(many=True), 401: 'Unauthorized'}
    )
    def get(self, request):
        page = _positive_int(request.query_params.get('page'), 1)
        limit = _positive_int(request.query_params.get('limit'), DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        unread_only = request.query_params.get('unreadOnly') == 'true'

        queryset = Notification.objects.filter(user=request.user)
        if unread_only:
            queryset = queryset.filter(read=False)

        total = queryset.count()
        offset = (page - 1) * limit
        notifications = queryset[offset:offset + limit]
        unread_count = Notification.objects.filter(user=request.user, read=False).count()

        return Response({
            'notifications': NotificationSerializer(notifications, many=True).data,
            'pagination': {
                'page': page,
                'limit': limit,
                'total': total,
                'totalPages': math.ceil(total / limit),
            },
            'unreadCount': unread_count,
        })

    @swagger_auto_schema(
        operation_description="Mark all of the authenticated user's notifications as read.",
        responses={200: 'OK', 401: 'Unauthorized'}
    )
    def patch(self, request):
        updated = Notification.objects.filter(user=request.user, read=False).update(read=True)
        return Response({'success': True, 'updated': updated})
