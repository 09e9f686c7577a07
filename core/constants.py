# core/constants.py
USER_ROLE_CHOICES = (
    ('CUSTOMER', 'Customer'),   # Books workers and pays for jobs
    ('WORKER', 'Worker'),       # Accepts and performs jobs
)

JOB_STATUS_CHOICES = (
    ('PENDING', 'Pending'),          # Booked by the customer, awaiting the worker
    ('ACCEPTED', 'Accepted'),        # Worker agreed to do the job
    ('IN_PROGRESS', 'In Progress'),  # Worker started with proof of work, cannot be cancelled
    ('COMPLETED', 'Completed'),      # Payment confirmed
    ('CANCELLED', 'Cancelled'),      # Cancelled before work started
)

CANCELLABLE_JOB_STATUSES = ('PENDING', 'ACCEPTED')

JOB_ACTION_CHOICES = (
    ('ACCEPT', 'Accept'),
    ('START', 'Start'),
    ('COMPLETE', 'Complete'),
    ('CANCEL', 'Cancel'),
)

JOB_LOG_ACTION_CHOICES = (
    ('JOB_CREATED', 'Job Created'),
    ('WORKER_ACCEPTED', 'Worker Accepted'),
    ('WORK_STARTED', 'Work Started'),
    ('PAYMENT_INITIATED', 'Payment Initiated'),
    ('PAYMENT_RESUMED', 'Payment Resumed'),
    ('JOB_CANCELLED', 'Job Cancelled'),
    ('PAYMENT_COMPLETED', 'Payment Completed'),
)

PAYMENT_STATUS_CHOICES = (
    ('PROCESSING', 'Processing'),   # Gateway order created, waiting for the customer
    ('PAID', 'Paid'),               # Signature verified
)

NOTIFICATION_TYPE_CHOICES = (
    ('JOB_BOOKED', 'Job Booked'),
    ('JOB_ACCEPTED', 'Job Accepted'),
    ('WORK_STARTED', 'Work Started'),
    ('PAYMENT_REQUESTED', 'Payment Requested'),
    ('JOB_CANCELLED', 'Job Cancelled'),
    ('PAYMENT_RECEIVED', 'Payment Received'),
)

DEFAULT_CANCEL_REASON = 'No reason provided'

REVIEW_RATING_CHOICES = [(i, i) for i in range(1, 6)]  # 1 to 5 stars
