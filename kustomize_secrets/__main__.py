"""Run the kustomize-secrets command line tool."""

from kustomize_secrets.tool.kustomize_secrets import main

main()
