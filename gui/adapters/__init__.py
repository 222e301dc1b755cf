"""GUI adapter layer.

This package provides thin Qt-shaped adapters over engine services.

Notes
-----
Adapters exist to:
- keep GUI code free of driver and query details,
- keep store calls off the UI thread,
- hand engine failures to the controller so views can display them.
"""
