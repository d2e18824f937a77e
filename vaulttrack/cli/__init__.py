"""Command-line entry points for VaultTrack."""
