"""Tests for kustomize-secrets."""
