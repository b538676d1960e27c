"""
Node Configuration-State Controller

Drives a managed node from configuring to configured, resolving its workload
pattern into dependent services and auto-provisioning the missing ones.
"""

__version__ = "0.1.0"
