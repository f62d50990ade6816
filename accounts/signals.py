# accounts/signals.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile


User = get_user_model()


@receiver(post_save, sender=User)
def ensure_profile(sender, instance, created, **kwargs):
    # GP balance is created lazily on first access, the profile right away
    if created:
        Profile.objects.get_or_create(user=instance)
