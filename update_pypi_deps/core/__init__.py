"""
Core functionality exports for update-pypi-deps.

The pipeline, in order of use::

    manifest   = load_manifest("pyproject.toml")           # parser
    resolution = await Resolver(lookup).resolve(manifest)  # resolver
    changes    = apply_resolutions(manifest, resolution.versions)  # updater
    text       = render_manifest(manifest)                 # serializer
"""

from __future__ import annotations

from update_pypi_deps.core.parser import build_manifest, load_manifest, parse_specifier
from update_pypi_deps.core.registry import PyPIRegistry
from update_pypi_deps.core.resolver import LookupOutcome, Resolution, Resolver
from update_pypi_deps.core.updater import SpecifierChange, apply_resolutions
from update_pypi_deps.core.serializer import render_group, render_manifest

__all__ = [
    "parse_specifier",
    "build_manifest",
    "load_manifest",
    "PyPIRegistry",
    "Resolver",
    "Resolution",
    "LookupOutcome",
    "apply_resolutions",
    "SpecifierChange",
    "render_group",
    "render_manifest",
]
