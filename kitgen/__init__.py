"""kitgen -- scaffolding engine for server-rendered Python web apps.

Generates a vertical slice per resource (handlers, Jinja2 UI template,
migration, query definitions, tests) from templates resolved through a
layered kit cascade, then wires the result into the app's composition root.
"""

__version__ = "0.1.0"
