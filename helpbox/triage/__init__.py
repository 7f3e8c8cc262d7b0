"""
Triage Module
=============

Bounded Context for automated first-pass ticket triage.

Responsibilities:
- Build the triage prompt from ticket fields
- Call the upstream model with bounded retries on 503
- Parse "LETTER|solution" answers into a priority (A/M/B) and solution
- Fall back to a safe result whenever the model cannot help

Used by the ticket-creation endpoint right before the ticket is stored.
"""

__version__ = "1.0.0"
