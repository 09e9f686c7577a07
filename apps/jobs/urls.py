from django.urls import path
from .views import JobCreateView, JobListView, JobDetailView, JobLogListView, JobReviewView

urlpatterns = [
    path('jobs/', JobListView.as_view(), name='job_list'),
    path('jobs/create/', JobCreateView.as_view(), name='job_create'),
    path('jobs/<int:pk>/', JobDetailView.as_view(), name='job_detail'),
    path('jobs/<int:pk>/logs/', JobLogListView.as_view(), name='job_logs'),
    path('jobs/<int:pk>/review/', JobReviewView.as_view(), name='job_review'),
]
