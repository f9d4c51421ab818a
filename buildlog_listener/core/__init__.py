"""
Core utilities — error taxonomy shared by the correlation engine, router,
event decoding, configuration and sinks.
"""
