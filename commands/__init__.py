"""
Velocity Command System

Commands are organized by namespace:
- velocity/ : Time-log analytics (insights, summary)
"""

__all__ = ["velocity"]
