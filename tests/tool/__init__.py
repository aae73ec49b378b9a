"""Tests for kustomize-secrets tools."""
