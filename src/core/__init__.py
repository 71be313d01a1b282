"""Core domain package for signalrelay.

Core holds extraction, the relay pipeline, and sequencing logic without any
Telegram, HTTP, or file-specific code, keeping the business logic portable.
"""
