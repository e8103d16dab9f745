"""
CourtTime Booking Store - App Configuration
===========================================
Relational state read by the booking rules engine.
"""

from django.apps import AppConfig


class BookingStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "courttime.booking_store"
    label = "booking_store"
    verbose_name = "CourtTime Booking Store"
