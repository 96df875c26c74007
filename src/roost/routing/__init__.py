"""Routing — pattern parsing, route storage, grouped-regex matching.

Routes are registered during setup; static ones are looked up by exact
path, dynamic ones are compiled per bucket into combined regexes on first
match and cached until the bucket changes.
"""
