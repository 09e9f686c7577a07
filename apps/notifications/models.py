from django.db import models
from django.conf import settings
from core.constants import NOTIFICATION_TYPE_CHOICES


class Notification(models.Model):
    """In-app notification shown in the user's notification list."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=30, choices=NOTIFICATION_TYPE_CHOICES)
    title = models.CharField(max_length=200)
    body = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.type} for {self.user.username} ({'read' if self.read else 'unread'})"
