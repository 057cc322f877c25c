"""
services/ - Business Logic Layer
================================
Record browsing and editing, authentication and exports.
Services call repositories and never touch SQL themselves.
"""
