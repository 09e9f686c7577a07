"""Tests for the jobs HTTP API."""

from datetime import timedelta
from unittest import mock

import pytest
import requests
from django.utils import timezone
from rest_framework.authtoken.models import Token

from apps.jobs.models import Job, JobLog

pytestmark = pytest.mark.django_db


def razorpay_response(order_id='order_RZP123', amount=50000):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {'id': order_id, 'amount': amount, 'currency': 'INR', 'status': 'created'}
    return response


def patch_job(client, job, body):
    return client.patch(f'/jobs/{job.id}/', body, format='json')


class TestJobAction:
    def test_accept(self, client_for, job, worker):
        response = patch_job(client_for(worker), job, {'action': 'ACCEPT'})

        assert response.status_code == 200
        data = response.json()
        assert data['success'] is True
        assert data['job']['status'] == 'ACCEPTED'
        assert 'requiresPayment' not in data

    def test_token_authentication(self, api_client, job, worker):
        token = Token.objects.create(user=worker)
        api_client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')

        response = patch_job(api_client, job, {'action': 'ACCEPT'})

        assert response.status_code == 200

    def test_unauthenticated(self, api_client, job):
        response = patch_job(api_client, job, {'action': 'ACCEPT'})

        assert response.status_code == 401
        assert response.json()['error'] == 'unauthenticated'

    def test_missing_job(self, client_for, worker):
        response = client_for(worker).patch('/jobs/424242/', {'action': 'ACCEPT'}, format='json')

        assert response.status_code == 404
        assert response.json()['error'] == 'not_found'

    def test_invalid_action(self, client_for, job, worker):
        response = patch_job(client_for(worker), job, {'action': 'REJECT'})

        assert response.status_code == 400
        assert response.json()['error'] == 'invalid_action'

    def test_forbidden(self, client_for, job, customer):
        response = patch_job(client_for(customer), job, {'action': 'ACCEPT'})

        assert response.status_code == 403
        assert response.json() == {'error': 'forbidden', 'message': 'Only the assigned worker can accept this job'}

    def test_invalid_state(self, client_for, make_job, worker):
        job = make_job(status='CANCELLED')

        response = patch_job(client_for(worker), job, {'action': 'ACCEPT'})

        assert response.status_code == 400
        assert response.json()['error'] == 'invalid_state'

    def test_start_with_proof(self, client_for, make_job, worker):
        job = make_job(status='ACCEPTED')

        response = patch_job(client_for(worker), job, {
            'action': 'START',
            'startProofPhoto': 'https://cdn.example.com/proof/1.jpg',
            'startProofGpsLat': 12.9716,
            'startProofGpsLng': 77.5946,
        })

        assert response.status_code == 200
        data = response.json()['job']
        assert data['status'] == 'IN_PROGRESS'
        assert data['start_proof_photo'] == 'https://cdn.example.com/proof/1.jpg'
        assert data['start_proof_gps_lat'] == 12.9716
        assert data['started_at'] is not None

    def test_start_without_proof(self, client_for, make_job, worker):
        job = make_job(status='ACCEPTED')

        response = patch_job(client_for(worker), job, {'action': 'START', 'startProofPhoto': 'p.jpg'})

        assert response.status_code == 400
        assert response.json()['error'] == 'missing_proof'

    def test_start_with_bad_coordinates(self, client_for, make_job, worker):
        job = make_job(status='ACCEPTED')

        response = patch_job(client_for(worker), job, {
            'action': 'START', 'startProofPhoto': 'p.jpg', 'startProofGpsLat': 91, 'startProofGpsLng': 77.6,
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'invalid_proof'

    def test_start_with_oversized_latitude(self, client_for, make_job, worker):
        job = make_job(status='ACCEPTED')

        response = patch_job(client_for(worker), job, {
            'action': 'START', 'startProofPhoto': 'p.jpg', 'startProofGpsLat': 10 ** 400, 'startProofGpsLng': 77.6,
        })

        assert response.status_code == 400
        assert response.json()['error'] == 'invalid_proof'
        job.refresh_from_db()
        assert job.status == 'ACCEPTED'

    def test_cancel_in_progress_is_anti_fraud(self, client_for, make_job, customer):
        job = make_job(status='IN_PROGRESS')

        response = patch_job(client_for(customer), job, {'action': 'CANCEL', 'reason': 'Too slow'})

        assert response.status_code == 400
        assert response.json() == {
            'error': 'anti_fraud_block',
            'message': 'Cannot cancel in-progress jobs - work has started',
        }

    def test_cancel(self, client_for, job, customer):
        response = patch_job(client_for(customer), job, {'action': 'CANCEL', 'reason': 'Booked by mistake'})

        assert response.status_code == 200
        assert response.json()['job']['status'] == 'CANCELLED'
        log = JobLog.objects.get(job=job)
        assert log.metadata == {'cancelledBy': 'customer', 'reason': 'Booked by mistake'}

    def test_unexpected_error_is_internal_error(self, client_for, job, worker):
        with mock.patch('apps.jobs.views.JobLifecycleController.apply_action', side_effect=RuntimeError('db down')):
            response = patch_job(client_for(worker), job, {'action': 'ACCEPT'})

        assert response.status_code == 500
        assert response.json() == {'error': 'internal_error', 'message': 'Internal Server Error'}


class TestCompleteAction:
    @mock.patch('apps.payments.gateway.requests.post')
    def test_complete_returns_checkout_details(self, mock_post, client_for, make_job, customer):
        mock_post.return_value = razorpay_response()
        job = make_job(status='IN_PROGRESS')

        response = patch_job(client_for(customer), job, {'action': 'COMPLETE'})

        assert response.status_code == 200
        data = response.json()
        assert data['success'] is True
        assert data['requiresPayment'] is True
        assert data['razorpayOrder'] == {
            'orderId': 'order_RZP123', 'amount': 50000, 'currency': 'INR', 'keyId': 'rzp_test_key',
        }
        assert data['job']['status'] == 'IN_PROGRESS'
        assert data['job']['payment_status'] == 'PROCESSING'

        args, kwargs = mock_post.call_args
        assert args[0] == 'https://api.razorpay.test/v1/orders'
        assert kwargs['json']['amount'] == 50000
        assert kwargs['json']['receipt'] == f'job_{job.id}'
        assert kwargs['auth'] == ('rzp_test_key', 'rzp_test_secret')
        assert kwargs['timeout'] == 10

    @mock.patch('apps.payments.gateway.requests.post')
    def test_retry_does_not_create_second_order(self, mock_post, client_for, make_job, customer):
        mock_post.return_value = razorpay_response()
        job = make_job(status='IN_PROGRESS')
        client = client_for(customer)

        first = patch_job(client, job, {'action': 'COMPLETE'})
        second = patch_job(client, job, {'action': 'COMPLETE'})

        assert mock_post.call_count == 1
        assert first.json()['razorpayOrder']['orderId'] == second.json()['razorpayOrder']['orderId']
        assert second.json()['razorpayOrder']['amount'] == 50000
        assert second.json()['message'] == 'Resuming existing payment order'

    @mock.patch('apps.payments.gateway.requests.post')
    def test_gateway_timeout(self, mock_post, client_for, make_job, customer):
        mock_post.side_effect = requests.exceptions.Timeout()
        job = make_job(status='IN_PROGRESS')

        response = patch_job(client_for(customer), job, {'action': 'COMPLETE'})

        assert response.status_code == 500
        assert response.json() == {'error': 'payment_gateway_error', 'message': 'Payment gateway timed out'}
        job.refresh_from_db()
        assert job.payment_gateway_order_id is None
        assert not JobLog.objects.filter(job=job).exists()


class TestJobCreate:
    def test_customer_books_worker(self, client_for, customer, worker):
        response = client_for(customer).post('/jobs/create/', {
            'worker_id': worker.id,
            'description': 'Repair ceiling fan',
            'location': 'Koramangala, Bengaluru',
            'scheduled_at': (timezone.now() + timedelta(days=2)).isoformat(),
            'charge': '750.00',
        }, format='json')

        assert response.status_code == 201
        data = response.json()['job']
        assert data['status'] == 'PENDING'
        assert data['charge'] == '750.00'
        assert data['worker']['id'] == worker.id
        job = Job.objects.get(pk=data['id'])
        assert job.customer == customer
        assert list(job.logs.values_list('action', flat=True)) == ['JOB_CREATED']

    def test_worker_cannot_book(self, client_for, worker, other_worker):
        response = client_for(worker).post('/jobs/create/', {
            'worker_id': other_worker.id,
            'description': 'x',
            'location': 'y',
            'scheduled_at': timezone.now().isoformat(),
            'charge': '100.00',
        }, format='json')

        assert response.status_code == 403
        assert response.json()['error'] == 'forbidden'

    @pytest.mark.parametrize('field, value', [('charge', '0'), ('charge', '-5'), ('worker_id', None)])
    def test_invalid_booking(self, client_for, customer, worker, field, value):
        body = {
            'worker_id': worker.id,
            'description': 'Paint bedroom',
            'location': 'Whitefield',
            'scheduled_at': timezone.now().isoformat(),
            'charge': '100.00',
        }
        body[field] = value

        response = client_for(customer).post('/jobs/create/', body, format='json')

        assert response.status_code == 400
        assert response.json()['error'] == 'validation_error'
        assert field in response.json()['details']

    def test_cannot_book_a_customer(self, client_for, customer, other_customer):
        response = client_for(customer).post('/jobs/create/', {
            'worker_id': other_customer.id,
            'description': 'x',
            'location': 'y',
            'scheduled_at': timezone.now().isoformat(),
            'charge': '100.00',
        }, format='json')

        assert response.status_code == 400
        assert 'worker_id' in response.json()['details']


class TestJobRead:
    def test_customer_lists_booked_jobs(self, client_for, make_job, customer, other_customer):
        mine = make_job()
        make_job(customer=other_customer)

        response = client_for(customer).get('/jobs/')

        assert response.status_code == 200
        assert [job['id'] for job in response.json()] == [mine.id]

    def test_worker_lists_assigned_jobs_by_status(self, client_for, make_job, worker):
        pending = make_job()
        make_job(status='CANCELLED')

        response = client_for(worker).get('/jobs/', {'status': 'pending'})

        assert [job['id'] for job in response.json()] == [pending.id]

    def test_detail_hidden_from_strangers(self, client_for, job, customer, other_worker):
        assert client_for(customer).get(f'/jobs/{job.id}/').status_code == 200
        assert client_for(other_worker).get(f'/jobs/{job.id}/').status_code == 404

    def test_audit_trail(self, client_for, job, customer, worker):
        patch_job(client_for(worker), job, {'action': 'ACCEPT'})
        patch_job(client_for(worker), job, {'action': 'CANCEL', 'reason': 'Fell ill'})

        response = client_for(customer).get(f'/jobs/{job.id}/logs/')

        assert response.status_code == 200
        logs = response.json()
        assert [(log['from_status'], log['to_status'], log['action']) for log in logs] == [
            ('PENDING', 'ACCEPTED', 'WORKER_ACCEPTED'),
            ('ACCEPTED', 'CANCELLED', 'JOB_CANCELLED'),
        ]
        assert logs[1]['metadata']['cancelledBy'] == 'worker'
        assert logs[1]['performed_by']['id'] == worker.id
