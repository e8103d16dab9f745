"""
CourtTime Booking Store
=======================
Django persistence for facilities, courts, members, households,
bookings and facility rule configuration.

Models are not imported here; import them from
courttime.booking_store.models once Django is configured.
"""
