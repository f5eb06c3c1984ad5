"""Questlock terminal views — read-only renderings of engine output.

Modules
-------
renderer
    ``StatusRenderer`` turns ``StatusReport`` and ``PrerequisiteGraph``
    into Rich renderables for terminal display.
"""
