"""Pull request pickup and merge time reporting for GitHub repositories."""

__version__ = "0.1.0"
