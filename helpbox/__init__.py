"""
Helpbox
=======

Help-desk ticketing API with automated AI triage.
"""

__version__ = "1.0.0"
