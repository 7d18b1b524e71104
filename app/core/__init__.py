"""
Core architecture components for the appointment booking service
"""
