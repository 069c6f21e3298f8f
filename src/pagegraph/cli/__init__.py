"""Command line interface for pagegraph."""
