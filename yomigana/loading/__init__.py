"""
Offline loaders that build the dictionary store.
"""
