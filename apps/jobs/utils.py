import logging
from apps.notifications.utils import send_notification

logger = logging.getLogger(__name__)

SIGNATURE = "Best regards,\nRozgaarSetu Team"


def _job_title(job):
    return job.description if len(job.description) <= 60 else f"{job.description[:57]}..."


def notify_job_booked(job, actor):
    worker = job.worker
    title = _job_title(job)
    email_subject = f"New Booking: {title}"
    email_message = (
        f"Dear {worker.display_name},\n\n"
        f"{job.customer.display_name} has booked you for a job.\n"
        f"Job Details:\n"
        f"- Description: {job.description}\n"
        f"- Location: {job.location}\n"
        f"- Scheduled: {job.scheduled_at:%d %b %Y %H:%M}\n"
        f"- Charge: Rs. {job.charge}\n\n"
        f"Please accept or cancel the booking in RozgaarSetu.\n\n"
        f"{SIGNATURE}"
    )
    sms_message = f"New booking from {job.customer.display_name}: {title}. Open RozgaarSetu to respond."
    send_notification(worker, 'JOB_BOOKED', email_subject, email_message, sms_message, {'jobId': job.id})


def notify_job_accepted(job, actor):
    customer = job.customer
    title = _job_title(job)
    email_subject = f"Job Accepted: {title}"
    email_message = (
        f"Dear {customer.display_name},\n\n"
        f"{job.worker.display_name} has accepted your job '{title}'.\n"
        f"They will arrive at {job.location} as scheduled.\n\n"
        f"{SIGNATURE}"
    )
    sms_message = f"{job.worker.display_name} accepted your job: {title}."
    send_notification(customer, 'JOB_ACCEPTED', email_subject, email_message, sms_message, {'jobId': job.id})


def notify_work_started(job, actor):
    customer = job.customer
    title = _job_title(job)
    email_subject = f"Work Started: {title}"
    email_message = (
        f"Dear {customer.display_name},\n\n"
        f"{job.worker.display_name} has started working on '{title}'.\n"
        f"Started at: {job.started_at:%d %b %Y %H:%M} UTC\n\n"
        f"{SIGNATURE}"
    )
    sms_message = f"{job.worker.display_name} has started work on: {title}."
    send_notification(customer, 'WORK_STARTED', email_subject, email_message, sms_message, {'jobId': job.id})


def notify_payment_requested(job, actor):
    worker = job.worker
    title = _job_title(job)
    email_subject = f"Payment Initiated: {title}"
    email_message = (
        f"Dear {worker.display_name},\n\n"
        f"{job.customer.display_name} has initiated payment of Rs. {job.charge} for '{title}'.\n"
        f"You will be notified once the payment is confirmed.\n\n"
        f"{SIGNATURE}"
    )
    sms_message = f"Payment of Rs. {job.charge} initiated for: {title}."
    send_notification(worker, 'PAYMENT_REQUESTED', email_subject, email_message, sms_message, {'jobId': job.id})


def notify_job_cancelled(job, actor, reason=''):
    recipient = job.worker if actor.pk == job.customer_id else job.customer
    title = _job_title(job)
    email_subject = f"Job Cancelled: {title}"
    email_message = (
        f"Dear {recipient.display_name},\n\n"
        f"The job '{title}' has been cancelled by {actor.display_name}.\n"
        f"Reason: {reason}\n\n"
        f"{SIGNATURE}"
    )
    sms_message = f"Job cancelled by {actor.display_name}: {title}."
    send_notification(recipient, 'JOB_CANCELLED', email_subject, email_message, sms_message, {'jobId': job.id})


def notify_payment_received(job, actor):
    worker = job.worker
    title = _job_title(job)
    email_subject = f"Payment Received: {title}"
    email_message = (
        f"Dear {worker.display_name},\n\n"
        f"The payment of Rs. {job.charge} for '{title}' has been confirmed.\n"
        f"Your earnings: Rs. {job.worker_earnings}\n"
        f"Thank you for your work.\n\n"
        f"{SIGNATURE}"
    )
    sms_message = f"Payment for {title} confirmed. Earnings: Rs. {job.worker_earnings}."
    send_notification(worker, 'PAYMENT_RECEIVED', email_subject, email_message, sms_message, {'jobId': job.id})


JOB_EVENT_NOTIFIERS = {
    'JOB_CREATED': notify_job_booked,
    'WORKER_ACCEPTED': notify_job_accepted,
    'WORK_STARTED': notify_work_started,
    'PAYMENT_INITIATED': notify_payment_requested,
    'JOB_CANCELLED': notify_job_cancelled,
    'PAYMENT_COMPLETED': notify_payment_received,
}


def notify_job_event(event, job, actor, **extra):
    """Send the notification for a job log event, if that event has one."""
    notifier = JOB_EVENT_NOTIFIERS.get(event)
    if notifier is None:
        return
    try:
        notifier(job, actor, **extra)
    except Exception as e:
        logger.error(f"Failed to send {event} notification for job {job.id}: {str(e)}")
