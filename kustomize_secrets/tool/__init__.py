"""Command line tools for kustomize-secrets."""
