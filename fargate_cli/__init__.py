"""Building blocks for AWS Fargate: certificates, deployment choices, environment, logs and events."""

__version__ = "0.1.0"