"""
Tickets Module
==============

Help-desk tickets: opening with automated triage, listings, technician
handling and the requester's close/reopen/agree workflow.
"""
