"""
nodecfg CLI - Node Configuration-State Controller

Commands:
- nodecfg device register/show - Device registration
- nodecfg configstate show/set - Configuration state
- nodecfg version
"""

__version__ = "0.1.0"
