"""
Runtime shells around the castle engine: session, auto-tick timer, turn log and replay.
"""
