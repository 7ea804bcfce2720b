from .reply_postprocessor import LlmReplyPostProcessor

__all__ = ["LlmReplyPostProcessor"]
