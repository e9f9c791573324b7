"""
Web Spec Interpreter
====================

Turns the unstructured text produced by LLM-backed agents into structured
data the rest of the Web Spec stack can consume.

Components:
- services: Stream demultiplexer, itemized response parser, field inference
- api: FastAPI endpoints
- models: Pydantic data models
- core: Configuration and dependencies
"""

__version__ = "1.0.0"
