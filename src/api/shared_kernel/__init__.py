"""Shared Kernel module.

Components every bounded context may depend on: the resolved tenant
context published by the tenant context guard and the observation context
carried by domain probes. Changes here affect every context and should be
carefully coordinated.
"""
