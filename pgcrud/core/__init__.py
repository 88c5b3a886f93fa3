"""
pgcrud.core
===========

Ambient pieces shared by the rest of the package: logging setup,
structured logging context, configuration and the error taxonomy.
"""
