"""
Plugins shipped with the weather plugin host.
"""
