"""logic/ai — Per-species agent behaviour.

Modules
-------
brains      — species update registry + fixed-order tick runner
perception  — nearest prey, threat alerts, nearest-land search
steering    — step / clamp / heading helpers, flee escape ladder
fish        — fish wander
herd        — pig and cow flee / graze
wolf        — wolf hunger economy, hunting, kills, water avoidance
pack        — pack join / found, recruitment, formation, dissolution
"""
