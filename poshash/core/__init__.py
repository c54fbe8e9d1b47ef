"""
Random table generation and hash composition.
"""
