"""Event Locator: event registration, geospatial search and reminders."""

__version__ = "1.0.0"
