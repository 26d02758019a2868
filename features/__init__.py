"""Feature packages: generation (request handling) and billing (quota state)."""
