"""Operational scripts, run as modules: `python -m scripts.<name>`.

Running from the project root keeps root imports (e.g. `import cms_client`,
`import config`) working without PYTHONPATH tweaks.
"""
