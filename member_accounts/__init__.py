"""
Member accounts backend.

Registration of role-differentiated members (students, doctors, global
network members) and administrators, authentication with signed tokens,
and the password and email verification lifecycle.
"""

__version__ = "1.0.0"
