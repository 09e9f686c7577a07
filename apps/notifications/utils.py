import re
import logging
from django.conf import settings
from django.core.mail import send_mail
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client as TwilioClient
from .models import Notification

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r'^\+\d{9,15}$')


def send_notification(user, notification_type, subject, email_message, sms_message, data=None):
    """
    Notify a user in-app, by email and by SMS.

    The in-app notification is always stored. Email and SMS are best effort:
    delivery failures are logged and never raised to the caller.
    """
    notification = Notification.objects.create(
        user=user,
        type=notification_type,
        title=subject,
        body=sms_message,
        data=data or {},
    )

    if user.email:
        try:
            send_mail(
                subject=subject,
                message=email_message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
                fail_silently=False,
            )
            logger.info(f"Email notification sent to user {user.id}")
        except Exception as e:
            logger.error(f"Failed to send email to {user.email}: {str(e)}")

    if user.phone_number:
        send_sms(user, sms_message)

    return notification


def send_sms(user, message):
    if not PHONE_PATTERN.match(user.phone_number):
        logger.warning(f"Invalid phone number format for user {user.id}: {user.phone_number}")
        return False
    if not settings.TWILIO_ACCOUNT_SID or not settings.TWILIO_AUTH_TOKEN:
        logger.debug(f"Twilio not configured, skipping SMS to user {user.id}")
        return False
    try:
        twilio_client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        twilio_client.messages.create(
            body=message,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=user.phone_number
        )
        logger.info(f"SMS notification sent to user {user.id}")
        return True
    except TwilioRestException as e:
        logger.error(f"Failed to send SMS to {user.phone_number}: {str(e)}")
        return False
