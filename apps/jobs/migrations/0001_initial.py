from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion

JOB_STATUS_CHOICES = [
    ('PENDING', 'Pending'),
    ('ACCEPTED', 'Accepted'),
    ('IN_PROGRESS', 'In Progress'),
    ('COMPLETED', 'Completed'),
    ('CANCELLED', 'Cancelled'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Job',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.TextField()),
                ('details', models.TextField(blank=True, null=True)),
                ('location', models.CharField(max_length=255)),
                ('scheduled_at', models.DateTimeField()),
                ('charge', models.DecimalField(decimal_places=2, max_digits=10)),
                ('status', models.CharField(choices=JOB_STATUS_CHOICES, default='PENDING', max_length=20)),
                ('start_proof_photo', models.CharField(blank=True, max_length=500, null=True)),
                ('start_proof_gps_lat', models.FloatField(blank=True, null=True)),
                ('start_proof_gps_lng', models.FloatField(blank=True, null=True)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('payment_gateway_order_id', models.CharField(blank=True, max_length=100, null=True, unique=True)),
                ('payment_status', models.CharField(blank=True, choices=[('PROCESSING', 'Processing'), ('PAID', 'Paid')], max_length=20, null=True)),
                ('payment_id', models.CharField(blank=True, max_length=100, null=True)),
                ('platform_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('worker_earnings', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='booked_jobs', to=settings.AUTH_USER_MODEL)),
                ('worker', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='assigned_jobs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='JobLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('from_status', models.CharField(blank=True, choices=JOB_STATUS_CHOICES, max_length=20, null=True)),
                ('to_status', models.CharField(choices=JOB_STATUS_CHOICES, max_length=20)),
                ('action', models.CharField(choices=[('JOB_CREATED', 'Job Created'), ('WORKER_ACCEPTED', 'Worker Accepted'), ('WORK_STARTED', 'Work Started'), ('PAYMENT_INITIATED', 'Payment Initiated'), ('PAYMENT_RESUMED', 'Payment Resumed'), ('JOB_CANCELLED', 'Job Cancelled'), ('PAYMENT_COMPLETED', 'Payment Completed')], max_length=30)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('job', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='logs', to='jobs.job')),
                ('performed_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='job_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['created_at', 'id'],
            },
        ),
    ]
