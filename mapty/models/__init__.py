from mapty.models.messages import InboundMessage, inbound_adapter

__all__ = ["InboundMessage", "inbound_adapter"]
