"""Service checker: probe services and deployments, remediate with bounded retries."""

__version__ = "0.1.0"
