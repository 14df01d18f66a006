"""
API Analysis Package.

This package contains the classification of public API types and the accessor
consistency checks run over them.

Modules:
    - ``api_filter``: Allow/deny policy deciding which types are public API.
    - ``properties``: Grouping of getters and setters into properties.
    - ``surface``: Collection of API types, methods and properties from a hierarchy.
    - ``consistency``: The property consistency checks and their findings.
"""
