"""
CourtTime Booking Store - Relational State
==========================================
Facilities, courts, members, households, bookings, facility rule
configuration, strikes and booking violations.

The rules engine only reads these tables (through
courttime.booking_store.provider) and writes BookingViolation rows for
admin overrides. Everything else is owned by the facility/booking
management surfaces.
"""

from __future__ import annotations

import uuid

from django.db import models


class CourtStatus(models.TextChoices):
    AVAILABLE = "available", "Available"
    MAINTENANCE = "maintenance", "Maintenance"
    CLOSED = "closed", "Closed"


class BookingStatus(models.TextChoices):
    CONFIRMED = "confirmed", "Confirmed"
    PENDING = "pending", "Pending"
    CANCELLED = "cancelled", "Cancelled"
    COMPLETED = "completed", "Completed"


class RuleCategory(models.TextChoices):
    ACCOUNT = "account", "Account"
    COURT = "court", "Court"
    HOUSEHOLD = "household", "Household"


class Facility(models.Model):
    id = models.CharField(primary_key=True, max_length=50)
    name = models.CharField(max_length=255)
    timezone = models.CharField(max_length=64, default="UTC")
    # [{"days": ["monday", ...], "start_time": "18:00", "end_time": "21:00"}]
    prime_time_windows = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "courttime_facilities"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.id} ({self.name})"


class MembershipTier(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name="tiers",
    )
    name = models.CharField(max_length=100)

    class Meta:
        db_table = "courttime_membership_tiers"
        ordering = ["facility_id", "name"]

    def __str__(self) -> str:
        return self.name


class Household(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name="households",
    )
    name = models.CharField(max_length=255, blank=True, default="")
    street_address = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "courttime_households"
        ordering = ["facility_id", "name"]

    def __str__(self) -> str:
        return self.name or self.street_address or str(self.id)


class Member(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    full_name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    tier = models.ForeignKey(
        MembershipTier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )
    household = models.ForeignKey(
        Household,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "courttime_members"
        ordering = ["full_name", "id"]

    def __str__(self) -> str:
        return self.full_name


class Court(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name="courts",
    )
    name = models.CharField(max_length=100)
    court_number = models.IntegerField(null=True, blank=True)
    court_type = models.CharField(max_length=50, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=CourtStatus.choices,
        default=CourtStatus.AVAILABLE,
    )

    class Meta:
        db_table = "courttime_courts"
        ordering = ["facility_id", "court_number", "name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"


class Booking(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    court = models.ForeignKey(
        Court,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    user = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    booking_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED,
    )
    booking_type = models.CharField(max_length=50, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "courttime_bookings"
        ordering = ["booking_date", "start_time", "id"]
        indexes = [
            models.Index(fields=["user", "booking_date"], name="idx_booking_user_date"),
            models.Index(fields=["facility", "booking_date"], name="idx_booking_fac_date"),
        ]

    def __str__(self) -> str:
        return f"{self.booking_date} {self.start_time}-{self.end_time} ({self.status})"


class FacilityRule(models.Model):
    """
    One configured rule instance. rule_config is interpreted by the
    evaluator registered for rule_code. Empty applies_to_* lists mean
    the rule applies to every court / tier.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name="rules",
    )
    rule_code = models.CharField(max_length=20)
    rule_category = models.CharField(max_length=20, choices=RuleCategory.choices)
    rule_name = models.CharField(max_length=255)
    rule_config = models.JSONField(default=dict, blank=True)
    applies_to_court_ids = models.JSONField(default=list, blank=True)
    applies_to_tier_ids = models.JSONField(default=list, blank=True)
    failure_message_template = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "courttime_facility_rules"
        ordering = ["facility_id", "display_order", "rule_code"]
        constraints = [
            models.UniqueConstraint(
                fields=["facility", "rule_code"],
                name="uq_facility_rule_code",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.rule_code} {self.rule_name}"


class Strike(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name="strikes",
    )
    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name="strikes",
    )
    booking = models.ForeignKey(
        Booking,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="strikes",
    )
    reason = models.CharField(max_length=255, blank=True, default="")
    issued_at = models.DateTimeField()
    expires_at = models.DateTimeField(null=True, blank=True)
    revoked = models.BooleanField(default=False)

    class Meta:
        db_table = "courttime_strikes"
        ordering = ["issued_at", "id"]
        indexes = [
            models.Index(fields=["user", "facility"], name="idx_strike_user_fac"),
        ]


class BookingViolation(models.Model):
    """Append-only record of rule violations and admin overrides."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="violations",
    )
    user = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name="violations",
    )
    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name="violations",
    )
    violation_type = models.CharField(max_length=50)
    violation_description = models.TextField()
    detected_at = models.DateTimeField(auto_now_add=True)
    resolved = models.BooleanField(default=False)
    resolved_at = models.DateTimeField(null=True, blank=True)
    resolved_by = models.CharField(max_length=255, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "courttime_booking_violations"
        ordering = ["detected_at", "id"]
        indexes = [
            models.Index(fields=["facility", "resolved"], name="idx_violation_fac_resolved"),
        ]

    def __str__(self) -> str:
        return f"{self.violation_type} ({'resolved' if self.resolved else 'open'})"
