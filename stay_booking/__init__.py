"""Stay availability, selection and pricing engine for a rental booking client."""

__version__ = "1.0.0"
