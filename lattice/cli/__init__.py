"""
CLI Module.

Command-line client built with Typer for managing apps on the receptor
and streaming their logs.

Architecture:
- CLI is a thin presentation layer
- Lifecycle rules live in lattice.app_runner
- Receptor and log stream are reached over HTTP (httpx)

Usage:
    lattice --help
    lattice app start my-app -i docker:///org/app -c /app/run
    lattice logs tail my-app
"""
