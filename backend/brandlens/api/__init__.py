"""
HTTP API for brandlens
"""
