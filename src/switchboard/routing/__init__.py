"""Routing — immutable route table with ordered path matchers.

Routes are registered during app setup and frozen into a ``RouteTable``
before the first request is served.
"""
