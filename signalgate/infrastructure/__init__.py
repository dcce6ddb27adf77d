"""
Infrastructure Layer.

Concrete implementations of the application ports and domain
repositories: exchange adapters, alert channels, event bus, persistence.
"""
