"""
relaysim: deterministic item-routing round simulation.
"""
