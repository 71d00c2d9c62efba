"""
Submission state machine module.

Drives a trade draft through Idle → Validating → Sanitizing → Persisting →
Notifying and back to Idle, one submission at a time.
"""
