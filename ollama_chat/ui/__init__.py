"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Model selection from the relay's model listing
    - Chat history display, re-rendered on every state snapshot
    - Single-line status for errors and the in-flight exchange

Contains no business logic. Delegates to ChatSession.
"""
