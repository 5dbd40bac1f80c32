"""
TreePlant events API: users register, create tree-planting events and join them.
"""

__version__ = "1.0.0"
