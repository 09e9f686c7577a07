from django.db import models
from django.conf import settings
from core.constants import (
    JOB_STATUS_CHOICES, JOB_LOG_ACTION_CHOICES, PAYMENT_STATUS_CHOICES, REVIEW_RATING_CHOICES,
)


class Job(models.Model):
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='booked_jobs')
    worker = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='assigned_jobs')
    description = models.TextField()
    details = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=255)
    scheduled_at = models.DateTimeField()
    charge = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=JOB_STATUS_CHOICES, default='PENDING')

    # Proof of work, captured by START
    start_proof_photo = models.CharField(max_length=500, blank=True, null=True)
    start_proof_gps_lat = models.FloatField(blank=True, null=True)
    start_proof_gps_lng = models.FloatField(blank=True, null=True)
    started_at = models.DateTimeField(blank=True, null=True)

    # Payment
    payment_gateway_order_id = models.CharField(max_length=100, blank=True, null=True, unique=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, blank=True, null=True)
    payment_id = models.CharField(max_length=100, blank=True, null=True)
    platform_fee = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    worker_earnings = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Job #{self.pk} ({self.status}) - {self.customer.username} -> {self.worker.username}"

    def is_party(self, user):
        """Whether the user is the customer or the worker on this job."""
        return user.pk in (self.customer_id, self.worker_id)


class JobLog(models.Model):
    """
    Append-only audit trail of a job.

    One row is written for every successful lifecycle action. Rows are never
    changed or removed once written.
    """
    job = models.ForeignKey(Job, on_delete=models.PROTECT, related_name='logs')
    from_status = models.CharField(max_length=20, choices=JOB_STATUS_CHOICES, blank=True, null=True)
    to_status = models.CharField(max_length=20, choices=JOB_STATUS_CHOICES)
    action = models.CharField(max_length=30, choices=JOB_LOG_ACTION_CHOICES)
    performed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='job_logs')
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.action} on job #{self.job_id}: {self.from_status} -> {self.to_status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Job logs are append-only and cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Job logs are append-only and cannot be deleted.")


class Review(models.Model):
    """The customer's rating of the worker on a completed job, at most one per job."""
    job = models.OneToOneField(Job, on_delete=models.PROTECT, related_name='review')
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='reviews_given')
    worker = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='reviews_received')
    rating = models.PositiveSmallIntegerField(choices=REVIEW_RATING_CHOICES)
    comment = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Review of {self.worker.username} on job #{self.job_id} ({self.rating}/5)"
