"""
mailcollect Modules
===================

Flask blueprints for the public API and the admin page.
"""

__all__ = ['subscribers', 'contact', 'dashboard', 'email', 'ops']
