"""
Core primitives shared by every ezkonnect layer: errors, logging,
settings, deadlines and the health router.
"""
