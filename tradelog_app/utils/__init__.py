"""
Utility functions module.

Time-of-day parsing, ISO timestamps and cancellation helpers shared by the
form session and the submission pipeline.
"""
