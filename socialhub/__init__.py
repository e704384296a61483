"""SocialHub notification backend.

The package holds the notification engine, push delivery, the cron job
scheduler and the composition root that wires them together.
"""
