"""Command line interface for midilink."""
