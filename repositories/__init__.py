"""
repositories/ - Data Access Layer
==================================
The query registry, the paged query executor and its row normalizer,
plus the write and user repositories. Everything that touches SQL lives here.
"""
