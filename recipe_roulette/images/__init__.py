"""
Recipe image lookup via the Pixabay search API, with a placeholder fallback.
"""
