"""
Report Package.

Modules:
    - ``signatures``: Source-like type and signature rendering.
    - ``assembler``: Markdown document assembly.
    - ``generator``: The end-to-end ``generate_report`` operation.
"""
