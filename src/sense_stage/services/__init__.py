"""Business logic services for the Sense API.

Modules are imported directly (``sense_stage.services.feed_service`` etc.) so
the repositories can depend on ``services.visibility`` without a cycle.
"""
