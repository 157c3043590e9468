"""
Adapters for provider payloads and response parsing
"""
