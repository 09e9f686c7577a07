from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.jobs.lifecycle import JobLifecycleController
from apps.jobs.models import Job
from apps.users.models import User
from tests.utils import FakeGateway


@pytest.fixture
def customer(db):
    return User.objects.create_user(
        username='asha', password='pass1234', first_name='Asha', last_name='Rao',
        email='asha@example.com', phone_number='+919800000001', role='CUSTOMER',
    )


@pytest.fixture
def other_customer(db):
    return User.objects.create_user(
        username='vikram', password='pass1234', email='vikram@example.com',
        phone_number='+919800000002', role='CUSTOMER',
    )


@pytest.fixture
def worker(db):
    return User.objects.create_user(
        username='ravi', password='pass1234', first_name='Ravi', last_name='Kumar',
        email='ravi@example.com', phone_number='+919800000003', role='WORKER',
    )


@pytest.fixture
def other_worker(db):
    return User.objects.create_user(
        username='suresh', password='pass1234', email='suresh@example.com',
        phone_number='+919800000004', role='WORKER',
    )


@pytest.fixture
def make_job(customer, worker):
    def _make_job(status='PENDING', charge=Decimal('500.00'), **fields):
        return Job.objects.create(
            customer=fields.pop('customer', customer),
            worker=fields.pop('worker', worker),
            description=fields.pop('description', 'Fix leaking kitchen tap'),
            location=fields.pop('location', 'HSR Layout, Bengaluru'),
            scheduled_at=fields.pop('scheduled_at', timezone.now() + timedelta(days=1)),
            charge=charge,
            status=status,
            **fields
        )
    return _make_job


@pytest.fixture
def job(make_job):
    return make_job()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def controller(gateway):
    return JobLifecycleController(gateway=gateway)


@pytest.fixture
def start_payload():
    return {'startProofPhoto': 'https://cdn.example.com/proof/p.jpg', 'startProofGpsLat': 12.9, 'startProofGpsLng': 77.6}


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client_for(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client_for
