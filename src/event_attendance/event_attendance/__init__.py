"""Event attendance check-in engine.

This package is organized by feature modules (events, codes, participants,
attendance) with a thin Flask controller layer and service/repository layers
underneath.
"""
