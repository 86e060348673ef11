"""
Administrator accounts: creation with generated default passwords, login
and the privileged role-change and removal operations.
"""
