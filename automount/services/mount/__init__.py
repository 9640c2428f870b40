"""
Mount orchestration.

Components:
- MountOrchestrator: attach sequence, watchdog race, docker/VM branching
- MountPipeline: directive phases around the primary mount
- MountedSet: process-lifetime insert-if-absent guard
- device_tags: node names and guest-visible serials

Import the modules directly; this package does not re-export them so the
directive registry can depend on MountedSet without an import cycle.
"""
