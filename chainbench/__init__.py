"""Collection of supply chain settings from GitHub and GitLab repositories into plain models."""

__version__ = "0.1.0"