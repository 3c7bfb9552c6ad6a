"""HTTP layer: Flask app factory, session domains and route blueprints.

Import ``webapp.app`` for ``create_app``; this package stays import-light so
the session module can be used while the context is being built.
"""
