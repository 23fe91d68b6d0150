"""Core domain package for holobot.

Core contains event dispatch, command routing, time conversion, and the
onboarding reconciler without any Mattermost or HTTP-specific code, keeping
the business logic portable and testable with fakes.
"""
