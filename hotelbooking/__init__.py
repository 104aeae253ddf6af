"""Hotel booking web service: client registry, bookings and payment tracking."""

__version__ = "0.1.0"