"""Client for planning, previewing and saving AI-generated travel itineraries."""

__version__ = "1.0.0"
