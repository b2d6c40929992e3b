"""SRV Portal - HTTP redirects and a resource portal driven by DNS SRV records."""

__version__ = "1.0.0"
