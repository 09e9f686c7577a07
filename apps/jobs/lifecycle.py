"""
Job lifecycle state machine.

    PENDING -> ACCEPTED -> IN_PROGRESS -> COMPLETED
       |           |
       +-----------+--> CANCELLED

IN_PROGRESS cannot be cancelled or reverted. COMPLETE only requests payment;
the job reaches COMPLETED when the payment is confirmed.

Every call runs inside one transaction with the job row locked, so two
requests on the same job are applied one after the other.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.payments.exceptions import InvalidPaymentSignature
from apps.payments.gateway import PaymentOrder, get_payment_gateway
from apps.payments.utils import calculate_fees, to_minor_units
from core.constants import CANCELLABLE_JOB_STATUSES
from .actions import AcceptAction, CancelAction, CompleteAction, StartAction, parse_action
from .exceptions import AntiFraudBlock, Forbidden, InvalidState, NotFound, Unauthenticated
from .models import Job, JobLog
from .utils import notify_job_event

logger = logging.getLogger(__name__)

PAYMENT_CREATED_MESSAGE = 'Payment order created'
PAYMENT_RESUMED_MESSAGE = 'Resuming existing payment order'
PAYMENT_CONFIRMED_MESSAGE = 'Payment already confirmed'


@dataclass
class ActionResult:
    job: Job
    payment_order: Optional[PaymentOrder] = None
    message: Optional[str] = None


class JobLifecycleController:
    def __init__(self, gateway=None, notifier=notify_job_event):
        self._gateway = gateway
        self.notifier = notifier
        self._handlers = {
            AcceptAction: self._accept,
            StartAction: self._start,
            CompleteAction: self._complete,
            CancelAction: self._cancel,
        }

    @property
    def gateway(self):
        if self._gateway is None:
            self._gateway = get_payment_gateway()
        return self._gateway

    def apply_action(self, job_id, actor, action, payload=None) -> ActionResult:
        """
        Apply ACCEPT, START, COMPLETE or CANCEL to a job on behalf of `actor`.

        Checks run in this order: the job exists, the actor is known, the
        action is known, the job is in the right status, the actor may act on
        the job, then the action payload. Nothing is written unless all checks
        pass, and exactly one JobLog row is written when they do.
        """
        with transaction.atomic():
            job = self._lock_job(job_id)
            self._require_actor(actor)
            typed_action = parse_action(action, payload)
            handler = self._handlers[type(typed_action)]
            return handler(job, actor, typed_action)

    def create_job(self, customer, worker, **fields) -> ActionResult:
        """Book `worker` for a new PENDING job paid for by `customer`."""
        self._require_actor(customer)
        if not customer.is_customer:
            raise Forbidden('Only customers can create jobs')
        with transaction.atomic():
            job = Job.objects.create(customer=customer, worker=worker, status='PENDING', **fields)
            self._log(job, None, 'JOB_CREATED', customer, {'charge': str(job.charge)})
        logger.info(f"Customer {customer.id} booked worker {worker.id} for job {job.id}")
        return ActionResult(job=job)

    def confirm_payment(self, actor, order_id, payment_id, signature) -> ActionResult:
        """
        Mark a job COMPLETED once the customer's payment signature checks out.

        Confirming again with the same payment id returns the job unchanged.
        """
        self._require_actor(actor)
        with transaction.atomic():
            job = Job.objects.select_for_update().filter(payment_gateway_order_id=order_id).first()
            if job is None:
                raise NotFound('No job found for this payment order')
            if not actor.is_customer or actor.pk != job.customer_id:
                raise Forbidden('Only the customer who booked this job can confirm its payment')
            if not self.gateway.verify_signature(order_id, payment_id, signature):
                raise InvalidPaymentSignature()

            if job.status == 'COMPLETED' and job.payment_status == 'PAID':
                if job.payment_id == payment_id:
                    return ActionResult(job=job, message=PAYMENT_CONFIRMED_MESSAGE)
                raise InvalidState('Payment for this job has already been confirmed')
            if job.status != 'IN_PROGRESS':
                raise InvalidState(f"Only in-progress jobs can be paid for. Job is {job.status}.")

            platform_fee, worker_earnings = calculate_fees(job.charge)
            from_status = job.status
            job.status = 'COMPLETED'
            job.payment_status = 'PAID'
            job.payment_id = payment_id
            job.platform_fee = platform_fee
            job.worker_earnings = worker_earnings
            job.completed_at = timezone.now()
            job.save(update_fields=[
                'status', 'payment_status', 'payment_id', 'platform_fee',
                'worker_earnings', 'completed_at', 'updated_at',
            ])
            self._log(job, from_status, 'PAYMENT_COMPLETED', actor, {
                'orderId': order_id,
                'paymentId': payment_id,
                'amount': str(job.charge),
                'platformFee': str(platform_fee),
                'workerEarnings': str(worker_earnings),
            })

        logger.info(f"Payment {payment_id} confirmed for job {job.id}")
        return ActionResult(job=job)

    # Shared checks

    def _lock_job(self, job_id):
        try:
            return Job.objects.select_for_update().get(pk=job_id)
        except Job.DoesNotExist:
            raise NotFound()

    def _require_actor(self, actor):
        if actor is None or not getattr(actor, 'is_authenticated', False):
            raise Unauthenticated()

    def _require_assigned_worker(self, job, actor, verb):
        if not actor.is_worker or actor.pk != job.worker_id:
            raise Forbidden(f"Only the assigned worker can {verb} this job")

    def _require_booking_customer(self, job, actor, verb):
        if not actor.is_customer or actor.pk != job.customer_id:
            raise Forbidden(f"Only the customer who booked this job can {verb} it")

    def _log(self, job, from_status, action, actor, metadata=None):
        entry = JobLog.objects.create(
            job=job,
            from_status=from_status,
            to_status=job.status,
            action=action,
            performed_by=actor,
            metadata=metadata or {},
        )
        transaction.on_commit(
            lambda: self.notifier(action, job, actor, **self._notification_extra(entry))
        )
        return entry

    def _notification_extra(self, entry):
        if entry.action == 'JOB_CANCELLED':
            return {'reason': entry.metadata.get('reason', '')}
        return {}

    # Actions

    def _accept(self, job, actor, action):
        if job.status != 'PENDING':
            raise InvalidState(f"Only pending jobs can be accepted. Job is {job.status}.")
        self._require_assigned_worker(job, actor, 'accept')

        from_status = job.status
        job.status = 'ACCEPTED'
        job.save(update_fields=['status', 'updated_at'])
        self._log(job, from_status, 'WORKER_ACCEPTED', actor)
        logger.info(f"Worker {actor.id} accepted job {job.id}")
        return ActionResult(job=job)

    def _start(self, job, actor, action):
        if job.status != 'ACCEPTED':
            raise InvalidState(f"Only accepted jobs can be started. Job is {job.status}.")
        self._require_assigned_worker(job, actor, 'start')
        proof = action.validate_proof()

        from_status = job.status
        job.status = 'IN_PROGRESS'
        job.start_proof_photo = proof.photo_reference
        job.start_proof_gps_lat = proof.gps_latitude
        job.start_proof_gps_lng = proof.gps_longitude
        job.started_at = timezone.now()
        job.save(update_fields=[
            'status', 'start_proof_photo', 'start_proof_gps_lat',
            'start_proof_gps_lng', 'started_at', 'updated_at',
        ])
        self._log(job, from_status, 'WORK_STARTED', actor, {
            'photo': proof.photo_reference,
            'gpsLat': proof.gps_latitude,
            'gpsLng': proof.gps_longitude,
            'startedAt': job.started_at.isoformat(),
        })
        logger.info(f"Worker {actor.id} started job {job.id} at ({proof.gps_latitude}, {proof.gps_longitude})")
        return ActionResult(job=job)

    def _complete(self, job, actor, action):
        if job.status != 'IN_PROGRESS':
            raise InvalidState(f"Only in-progress jobs can be completed. Job is {job.status}.")
        self._require_booking_customer(job, actor, 'complete')

        if job.payment_gateway_order_id:
            order = self.gateway.checkout(job.payment_gateway_order_id, job.charge)
            self._log(job, job.status, 'PAYMENT_RESUMED', actor, {
                'orderId': order.order_id,
                'amount': order.amount,
            })
            logger.info(f"Customer {actor.id} resumed payment order {order.order_id} for job {job.id}")
            return ActionResult(job=job, payment_order=order, message=PAYMENT_RESUMED_MESSAGE)

        customer = job.customer
        order = self.gateway.create_order(job.id, job.charge, customer.email, customer.phone_number)

        job.payment_gateway_order_id = order.order_id
        job.payment_status = 'PROCESSING'
        job.save(update_fields=['payment_gateway_order_id', 'payment_status', 'updated_at'])
        self._log(job, job.status, 'PAYMENT_INITIATED', actor, {
            'orderId': order.order_id,
            'amount': to_minor_units(job.charge),
            'charge': str(job.charge),
        })
        logger.info(f"Customer {actor.id} initiated payment order {order.order_id} for job {job.id}")
        return ActionResult(job=job, payment_order=order, message=PAYMENT_CREATED_MESSAGE)

    def _cancel(self, job, actor, action):
        # Work has started; only payment can close the job now
        if job.status == 'IN_PROGRESS':
            raise AntiFraudBlock()
        if job.status not in CANCELLABLE_JOB_STATUSES:
            raise InvalidState(f"Only pending or accepted jobs can be cancelled. Job is {job.status}.")

        if actor.is_customer and actor.pk == job.customer_id:
            cancelled_by = 'customer'
        elif actor.is_worker and actor.pk == job.worker_id:
            cancelled_by = 'worker'
        else:
            raise Forbidden('Only the customer or the assigned worker can cancel this job')

        from_status = job.status
        job.status = 'CANCELLED'
        job.save(update_fields=['status', 'updated_at'])
        self._log(job, from_status, 'JOB_CANCELLED', actor, {
            'cancelledBy': cancelled_by,
            'reason': action.reason,
        })
        logger.info(f"Job {job.id} cancelled by {cancelled_by} {actor.id}: {action.reason}")
        return ActionResult(job=job)
