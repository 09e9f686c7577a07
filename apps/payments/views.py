from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from apps.jobs.lifecycle import JobLifecycleController
from apps.jobs.serializers import JobSerializer
from .serializers import PaymentVerifySerializer


class PaymentVerifyView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description=(
            "Confirm a Razorpay checkout. The signature is checked against the order and payment ids; "
            "on success the job is marked COMPLETED."
        ),
        request_body=PaymentVerifySerializer,
        responses={
            200: JobSerializer,
            400: 'Bad Request',
            401: 'Unauthorized',
            403: 'Forbidden',
            404: 'Not Found'
        }
    )
    def post(self, request):
        serializer = PaymentVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = JobLifecycleController().confirm_payment(
            request.user,
            data['razorpay_order_id'],
            data['razorpay_payment_id'],
            data['razorpay_signature'],
        )
        response = {'success': True, 'job': JobSerializer(result.job).data}
        if result.message:
            response['message'] = result.message
        return Response(response)
