"""API routers package. Each module owns one API domain and delegates to ``ezkonnect.ops``."""
