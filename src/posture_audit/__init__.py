"""posture-audit: OS security posture auditing with tamper-evident reports."""

__version__ = "1.1.0"
