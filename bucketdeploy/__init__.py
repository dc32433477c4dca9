"""Deploy a local directory tree to an object-storage bucket under a timestamp prefix."""

__version__ = "0.1.0"
