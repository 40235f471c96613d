"""Tag-driven release promotion: build, draft and publish one version."""

__version__ = "0.4.0"
