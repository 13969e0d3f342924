"""
MongoDB wiring.
"""
