"""Host backends that drive playback and render the head.

This module contains the concrete backend implementations:
- matplotlib_backend: FuncAnimation host with a clickable category picker
"""
