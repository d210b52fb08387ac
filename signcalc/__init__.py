"""
signcalc - structural verification of sign supports.

Wind load, member, anchor bolt, base plate and footing checks for
free-standing, projecting and wall-mounted signs, plus an automatic design
pass and footing optimizer.
"""

__version__ = "1.0.0"
