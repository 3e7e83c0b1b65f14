"""Command-line interface for projectledger."""
