"""
models/ - Domain Layer
======================
Dataclasses passed between layers and the application's error taxonomy.
"""
