"""
Conversational trip planning assistant powered by Google Gemini and Tavily.

This package implements a conversation graph that collects trip parameters
step by step, searches for transportation, accommodation and activities,
reconciles the results against the traveler's budget, and composes a
day-by-day travel plan.
"""

__version__ = "0.1.0"
