"""Cloudflare DNS API integration."""

from .client import CloudflareRecordSource

__all__ = ['CloudflareRecordSource']
