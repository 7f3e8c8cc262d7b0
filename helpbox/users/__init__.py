"""
Users Module
============

Accounts, access levels and cookie-based login sessions.
"""
