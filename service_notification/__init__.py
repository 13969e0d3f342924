"""
Notification service for the Notification Service platform.
"""
