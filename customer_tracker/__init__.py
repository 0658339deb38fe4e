"""
Customer Tracker.

Customer-tracking backend over a hosted Supabase project.
"""

__version__ = "1.0.0"
