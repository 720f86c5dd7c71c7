"""
Test support for beanschema tests.

``beans`` holds the sample bean classes shared across test modules. They
live at module level so their annotations resolve through the module globals.
"""
