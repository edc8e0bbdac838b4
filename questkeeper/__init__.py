"""
QuestKeeper rules engine.

This package contains the D&D 5e styled rules used by the adventure:
characters, class features, dice, item effects, spells, rests and
turn-based combat.
"""
