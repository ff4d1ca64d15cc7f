"""
Registry Module - Black Box Interface

Purpose: Track the sessions used during one request
Interface: get_registry(), Registry.get(), Registry.save(), Registry.flush(), save()
Hidden: Per-name cache, creation-error caching, save aggregation

One registry per request context; never shared across requests.
"""

from .registry import Registry, RequestContext, get_registry, save

__all__ = ["Registry", "RequestContext", "get_registry", "save"]
