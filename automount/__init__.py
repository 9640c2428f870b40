"""
AutoMount - attaches game data images to a running VM.

Game data is hot-plugged through QMP (or handed straight to the mount helper
when the game server runs in docker) and registered with the mount helper so
it shows up inside the guest. Per-game mount parameters can suppress the
auto-mount (`extract`) or attach extra files (`extra;<path>;<mountpoint>;`).
"""

__version__ = "0.1.0"
