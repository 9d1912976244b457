"""Android-flavoured wg-quick: bring WireGuard interfaces up and down through netd."""

__version__ = "1.0.0"
