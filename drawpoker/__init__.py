"""
Five-Card Draw poker for the terminal.

The engines in this package never print; they emit events that the
terminal front ends (local console or SSH) render.
"""
