"""Domain Layer - Appointment Booking.

Draft aggregate, providers, time slots and the pure rules over them.
"""
