"""
Core functionality for the YouTube video analyzer application.

This package contains the AI request gateway (rate limiting, input
validation, prompt building, upstream calls) and the YouTube metadata client.
"""
