"""simulation — Host-facing simulation layer.

Submodules
----------
world_sim   WorldSim facade (regenerate, resize, move, advance, snapshot)
            and the AgentView snapshot record
clock       SimulationClock — pause, time scale, per-frame driving
"""
