"""
Member accounts module.

This module provides:
- Role-specific registration validation (students, doctors, global network members)
- The identity store access layer
- Login and profile management
- Email verification and the password reset / change lifecycle
"""
