from django.db import models
from django.contrib.auth.models import AbstractUser
from core.constants import USER_ROLE_CHOICES


class User(AbstractUser):
    email = models.EmailField(blank=True, null=True, unique=True)
    phone_number = models.CharField(max_length=15, blank=True, null=True, unique=True)
    role = models.CharField(max_length=10, choices=USER_ROLE_CHOICES, default='CUSTOMER')

    @property
    def is_customer(self):
        return self.role == 'CUSTOMER'

    @property
    def is_worker(self):
        return self.role == 'WORKER'

    @property
    def display_name(self):
        return self.get_full_name() or self.username

    def __str__(self):
        return f"{self.username} ({self.role})"
