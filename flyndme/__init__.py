"""
FlyndMe - cheapest common destination for travelers starting from different airports
"""
