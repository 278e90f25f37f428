"""Game engines: room lifecycle, phase machine, turns, voting and scoring.

This package contains the authoritative game logic imported by the HTTP
routes and socket handlers, keeping transport concerns separated from core
game mechanics. Every command function performs its reads and writes in one
database transaction and commits exactly once.
"""
