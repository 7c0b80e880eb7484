"""TrackProxy: caching and error-normalizing front end for parcel tracking lookups."""

__version__ = "1.0.0"
