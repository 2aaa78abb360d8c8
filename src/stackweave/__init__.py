# src/stackweave/__init__.py
"""
stackweave: configuration-time composition of modular network stacks

  - core: descriptors, nodes, constraint aggregation, emission
  - devices: descriptors for link, ARP, IP, dual-stack and connection layers
  - manifest: YAML stack manifests
  - build: manifest -> generated main module + package table
  - config / env / build_logging: build settings, .env loading, JSONL logs
"""

from __future__ import annotations

__all__ = [
    "core",
    "devices",
    "manifest",
    "build",
    "config",
    "env",
    "build_logging",
]
