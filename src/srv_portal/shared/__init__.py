"""Shared configuration and logging helpers for the SRV portal."""
