"""
Application Layer

Contains the command use cases and the voice event reactors.
This layer orchestrates domain objects and infrastructure ports to fulfill use cases.

Structure:
- services/: Playback request handlers
- reactors.py: Handlers registered against voice events
- interfaces/: Port interfaces for infrastructure adapters
"""
