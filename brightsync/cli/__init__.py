"""CLI subcommands for brightsync."""
