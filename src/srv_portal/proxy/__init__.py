"""Redirect application for SRV-backed hostnames."""

from .app import SrvRedirectApp, path_and_query

__all__ = ['SrvRedirectApp', 'path_and_query']
