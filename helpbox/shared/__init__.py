"""
Shared Kernel Module
====================

This module contains shared infrastructure used across all bounded contexts
(Users, Tickets and Triage).

Architecture Pattern: Modular Monolith
- Each module (users, tickets, triage) is a bounded context
- Shared kernel contains only generic infrastructure: logging, HTTP
  middleware, password hashing and session-based auth dependencies

DO NOT add ticket or triage business logic to the shared kernel.
"""

__version__ = "1.0.0"
