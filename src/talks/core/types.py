"""Shared type aliases for the core and domain layers."""
ActionId = int
ActorId = str

__all__ = ["ActionId", "ActorId"]
