"""Shared kernel for the subsites service.

Holds what more than one bounded context relies on: the request-scoped
subsite context, the observation context carried by domain probes, and
the capability lookup contract used for authorization. Nothing here may
import from a bounded context.
"""
