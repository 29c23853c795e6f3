"""
Project-level tests for the Health Scale Digital backend.

Test Organization:
- test_core.py - error handlers, API error shape, notification check command
- test_notification_services.py - email and WhatsApp senders
- App-specific tests remain in their respective app directories (e.g., accounts/tests.py)
"""
