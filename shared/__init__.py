"""
Shared Kernel

Base classes and utilities shared by the domain apps: value objects,
domain events, the unit of work and the in-process message bus.
"""
