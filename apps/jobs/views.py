import logging
from django.db import transaction
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from core.constants import JOB_ACTION_CHOICES, JOB_STATUS_CHOICES
from core.utils import IsCustomer
from .exceptions import AlreadyReviewed, InvalidState, NotFound
from .lifecycle import JobLifecycleController
from .models import Job, Review
from .serializers import (
    JobSerializer, JobCreateSerializer, JobLogSerializer, PaymentOrderSerializer, ReviewSerializer,
)

logger = logging.getLogger(__name__)

JOB_LIST_LIMIT = 50

ERROR_SCHEMA = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'error': openapi.Schema(type=openapi.TYPE_STRING),
        'message': openapi.Schema(type=openapi.TYPE_STRING),
    }
)


def get_party_job(user, pk):
    """Fetch a job the user is the customer or worker on, else NotFound."""
    try:
        job = Job.objects.select_related('customer', 'worker').get(pk=pk)
    except Job.DoesNotExist:
        raise NotFound()
    if not job.is_party(user):
        raise NotFound()
    return job


class JobCreateView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Book a worker. The job starts in PENDING until the worker accepts it.",
        request_body=JobCreateSerializer,
        responses={
            201: JobSerializer,
            400: 'Bad Request',
            401: 'Unauthorized',
            403: 'Forbidden'
        }
    )
    def post(self, request):
        serializer = JobCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        worker = data.pop('worker')
        result = JobLifecycleController().create_job(request.user, worker, **data)
        return Response({'success': True, 'job': JobSerializer(result.job).data}, status=status.HTTP_201_CREATED)


class JobListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List jobs booked by the authenticated customer or assigned to the authenticated worker.",
        manual_parameters=[
            openapi.Parameter(
                'status', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                enum=[choice for choice, _ in JOB_STATUS_CHOICES]
            ),
        ],
        responses={200: JobSerializer(many=True), 401: 'Unauthorized'}
    )
    def get(self, request):
        if request.user.is_worker:
            queryset = Job.objects.filter(worker=request.user)
        else:
            queryset = Job.objects.filter(customer=request.user)

        job_status = request.query_params.get('status')
        if job_status:
            queryset = queryset.filter(status=job_status.upper())

        jobs = queryset.select_related('customer', 'worker').order_by('-created_at')[:JOB_LIST_LIMIT]
        serializer = JobSerializer(jobs, many=True)
        return Response(serializer.data)


class JobDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Retrieve a job (customer or assigned worker only).",
        responses={200: JobSerializer, 401: 'Unauthorized', 404: 'Not Found'}
    )
    def get(self, request, pk):
        job = get_party_job(request.user, pk)
        return Response(JobSerializer(job).data)

    @swagger_auto_schema(
        operation_description=(
            "Move a job through its lifecycle.\n\n"
            "- ACCEPT (worker): PENDING -> ACCEPTED\n"
            "- START (worker): ACCEPTED -> IN_PROGRESS, requires photo and GPS proof\n"
            "- COMPLETE (customer): creates or resumes the payment order, job stays IN_PROGRESS\n"
            "- CANCEL (customer or worker): PENDING/ACCEPTED -> CANCELLED"
        ),
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['action'],
            properties={
                'action': openapi.Schema(type=openapi.TYPE_STRING, enum=[choice for choice, _ in JOB_ACTION_CHOICES]),
                'startProofPhoto': openapi.Schema(type=openapi.TYPE_STRING, description='START: uploaded photo URL'),
                'startProofGpsLat': openapi.Schema(type=openapi.TYPE_NUMBER, description='START: latitude'),
                'startProofGpsLng': openapi.Schema(type=openapi.TYPE_NUMBER, description='START: longitude'),
                'reason': openapi.Schema(type=openapi.TYPE_STRING, description='CANCEL: optional reason'),
            },
        ),
        responses={
            200: openapi.Response('Updated job', openapi.Schema(
                type=openapi.TYPE_OBJECT,
                properties={
                    'success': openapi.Schema(type=openapi.TYPE_BOOLEAN),
                    'requiresPayment': openapi.Schema(type=openapi.TYPE_BOOLEAN),
                    'razorpayOrder': openapi.Schema(
                        type=openapi.TYPE_OBJECT,
                        properties={
                            'orderId': openapi.Schema(type=openapi.TYPE_STRING),
                            'amount': openapi.Schema(type=openapi.TYPE_INTEGER),
                            'currency': openapi.Schema(type=openapi.TYPE_STRING),
                            'keyId': openapi.Schema(type=openapi.TYPE_STRING),
                        }
                    ),
                    'message': openapi.Schema(type=openapi.TYPE_STRING),
                    'job': openapi.Schema(type=openapi.TYPE_OBJECT),
                }
            )),
            400: openapi.Response('Bad Request', ERROR_SCHEMA),
            401: openapi.Response('Unauthorized', ERROR_SCHEMA),
            403: openapi.Response('Forbidden', ERROR_SCHEMA),
            404: openapi.Response('Not Found', ERROR_SCHEMA),
            500: openapi.Response('Payment gateway or server error', ERROR_SCHEMA),
        }
    )
    def patch(self, request, pk):
        payload = request.data if hasattr(request.data, 'get') else {}
        result = JobLifecycleController().apply_action(pk, request.user, payload.get('action'), payload)

        data = {'success': True}
        if result.payment_order is not None:
            data['requiresPayment'] = True
            data['razorpayOrder'] = PaymentOrderSerializer(result.payment_order).data
            data['message'] = result.message
        data['job'] = JobSerializer(result.job).data
        return Response(data)


class JobLogListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Audit trail of a job, oldest entry first.",
        responses={200: JobLogSerializer(many=True), 401: 'Unauthorized', 404: 'Not Found'}
    )
    def get(self, request, pk):
        job = get_party_job(request.user, pk)
        logs = job.logs.select_related('performed_by')
        return Response(JobLogSerializer(logs, many=True).data)


class JobReviewView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Rate the worker on a completed job you booked. Each job can be reviewed once.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['rating'],
            properties={
                'rating': openapi.Schema(type=openapi.TYPE_INTEGER, minimum=1, maximum=5, description='Rating from 1 to 5'),
                'comment': openapi.Schema(type=openapi.TYPE_STRING, description='Optional comment', nullable=True),
            },
        ),
        responses={
            201: ReviewSerializer,
            400: openapi.Response('Bad Request', ERROR_SCHEMA),
            401: openapi.Response('Unauthorized', ERROR_SCHEMA),
            403: openapi.Response('Forbidden', ERROR_SCHEMA),
            404: openapi.Response('Not Found', ERROR_SCHEMA),
        }
    )
    def post(self, request, pk):
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            try:
                job = Job.objects.select_for_update().get(pk=pk, customer=request.user)
            except Job.DoesNotExist:
                raise NotFound()
            if job.status != 'COMPLETED':
                raise InvalidState(f"Only completed jobs can be reviewed. Job is {job.status}.")
            if Review.objects.filter(job=job).exists():
                raise AlreadyReviewed()
            review = serializer.save(job=job, customer=request.user, worker=job.worker)

        logger.info(f"Customer {request.user.id} rated worker {job.worker_id} {review.rating}/5 for job {job.id}")
        return Response({'success': True, 'review': ReviewSerializer(review).data}, status=status.HTTP_201_CREATED)
