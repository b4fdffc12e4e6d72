"""
Services provided by plugins to the host.
"""
