from .chat import ChatReply, ChatService, VoiceResult

__all__ = ["ChatReply", "ChatService", "VoiceResult"]
