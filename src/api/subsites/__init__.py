"""Subsites bounded context.

Subsite-aware access control for security groups: which subsites a group
is valid in, scoping group queries to the active subsite, migrating the
legacy single-subsite column, and deciding who may edit a group.
"""
