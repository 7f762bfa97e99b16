"""
Lazy Fish Tank Simulation

A deterministic, headless aquarium simulator: creatures with decaying needs,
a shared water quality resource, a coin economy, quests, and random events.

Architecture: the tick resolver and commands are pure state transitions;
AquariumSimulation owns the authoritative state and a scheduler drives it.
"""

__version__ = "0.1.0"
