"""shadcn-scaffolder — resumable project provisioning."""

__version__ = "0.1.0"
