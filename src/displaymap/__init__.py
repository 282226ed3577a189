"""
displaymap
==========
Offline generator of the lookup tables that map the CHIP-8 emulator screen
(virtual space) onto the curved PineTime display (physical space).
"""
