"""Tests for customer reviews of completed jobs."""

import pytest

from apps.jobs.models import Review

pytestmark = pytest.mark.django_db


@pytest.fixture
def completed_job(make_job):
    return make_job(status='COMPLETED')


def post_review(client, job, body):
    return client.post(f'/jobs/{job.id}/review/', body, format='json')


def test_customer_reviews_completed_job(client_for, completed_job, customer, worker):
    response = post_review(client_for(customer), completed_job, {'rating': 5, 'comment': '  Quick and tidy work  '})

    assert response.status_code == 201
    data = response.json()
    assert data['success'] is True
    assert data['review']['rating'] == 5
    assert data['review']['comment'] == 'Quick and tidy work'
    assert data['review']['worker'] == worker.id
    review = Review.objects.get(job=completed_job)
    assert review.customer == customer
    assert review.worker == worker


def test_comment_is_optional(client_for, completed_job, customer):
    response = post_review(client_for(customer), completed_job, {'rating': 3, 'comment': ''})

    assert response.status_code == 201
    assert Review.objects.get(job=completed_job).comment is None


@pytest.mark.parametrize('rating', [0, 6, 4.5, 'great', None])
def test_rating_must_be_one_to_five(client_for, completed_job, customer, rating):
    response = post_review(client_for(customer), completed_job, {'rating': rating})

    assert response.status_code == 400
    assert response.json()['error'] == 'validation_error'
    assert 'rating' in response.json()['details']
    assert not Review.objects.exists()


def test_rating_is_required(client_for, completed_job, customer):
    response = post_review(client_for(customer), completed_job, {'comment': 'Nice'})

    assert response.status_code == 400
    assert 'rating' in response.json()['details']


@pytest.mark.parametrize('status', ['PENDING', 'ACCEPTED', 'IN_PROGRESS', 'CANCELLED'])
def test_only_completed_jobs_can_be_reviewed(client_for, make_job, customer, status):
    job = make_job(status=status)

    response = post_review(client_for(customer), job, {'rating': 4})

    assert response.status_code == 400
    assert response.json()['error'] == 'invalid_state'


def test_one_review_per_job(client_for, completed_job, customer):
    client = client_for(customer)
    post_review(client, completed_job, {'rating': 4})

    response = post_review(client, completed_job, {'rating': 1})

    assert response.status_code == 400
    assert response.json()['error'] == 'already_reviewed'
    assert Review.objects.get(job=completed_job).rating == 4


def test_other_customers_job_is_not_found(client_for, completed_job, other_customer):
    response = post_review(client_for(other_customer), completed_job, {'rating': 5})

    assert response.status_code == 404
    assert response.json()['error'] == 'not_found'


def test_missing_job(client_for, customer):
    response = client_for(customer).post('/jobs/424242/review/', {'rating': 5}, format='json')

    assert response.status_code == 404


def test_workers_cannot_review(client_for, completed_job, worker):
    response = post_review(client_for(worker), completed_job, {'rating': 5})

    assert response.status_code == 403
    assert response.json()['error'] == 'forbidden'


def test_requires_login(api_client, completed_job):
    response = post_review(api_client, completed_job, {'rating': 5})

    assert response.status_code == 401
