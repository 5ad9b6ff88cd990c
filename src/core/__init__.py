"""Core domain package for tracescope.

Core contains trace analysis, the tracker services, and share-link logic
without any storage- or UI-specific code, keeping the business logic portable.
"""
