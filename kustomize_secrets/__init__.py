"""
kustomize-secrets is a library for injecting secret values into workloads.

The transformer visits every resource in a kustomize resource stream, decodes
the workloads it knows about into typed objects, rewrites secret references
found in their pod templates, and adds any generated Secrets to the stream.
"""

__all__ = [
    "api",
    "codec",
    "config",
    "exceptions",
    "generator",
    "mutator",
    "resource",
    "scheme",
    "transformer",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
