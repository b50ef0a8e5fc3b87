"""Command-line interface for ezkonnect (``ezkonnect serve``)."""
