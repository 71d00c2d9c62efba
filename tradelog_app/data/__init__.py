"""
Trade draft data module.

Holds the canonical trade-entry models and the boundary checks applied to
user input before it leaves the form: numeric validation, identifier
sanitization and emotional-state normalization.
"""
