"""Domain configuration packages for the media generation backend."""
