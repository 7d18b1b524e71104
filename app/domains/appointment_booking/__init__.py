"""Appointment Booking domain.

Patient-facing booking workflow: identity verification, provider
selection, slot selection, confirmation, modification and cancellation.
"""
