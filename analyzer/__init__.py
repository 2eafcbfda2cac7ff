"""
Chat pattern analyzer core package.

Turns an uploaded chat-history export into a sampled LLM prompt, and stores
the structured analysis the model returns in a local key-value store.
"""
