"""
reboot-to: pick a UEFI boot entry and reboot into it (once)
"""
__version__ = '1.0.0'
