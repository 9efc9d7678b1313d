"""
Prompt and query templates for the Trip Concierge system.
"""
