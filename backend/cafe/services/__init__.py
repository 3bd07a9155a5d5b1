"""Domain services. Each is constructed with the request's database session."""
