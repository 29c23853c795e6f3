"""
Contact Management App

Handles contact form submissions from the marketing website:
- Public contact form submission with validation
- Background email and WhatsApp notifications
- Notification outcome log for the admin dashboard
"""
