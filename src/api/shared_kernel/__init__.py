"""Shared Kernel module.

Building blocks every bounded context may depend on: the outbox value
objects and ports, and the correlation id middleware. Nothing in here may
import a bounded context or the infrastructure package.
"""
