"""Kubernetes Deployments, Jobs and Services for OAM workload types, and a small API client."""

__version__ = "0.1.0"

__all__ = ["builders", "kube", "metadata", "server", "task", "worker"]