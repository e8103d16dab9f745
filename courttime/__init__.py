"""
CourtTime — Booking Rules Engine
==================================
Facility-configurable booking and cancellation rule evaluation for
shared sports courts.
"""
