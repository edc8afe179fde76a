"""Plugin-driven transforms of Kubernetes manifests into JSON patches and whiteouts."""

__version__ = "0.0.8"