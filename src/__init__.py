"""
Discord Channel Architect Bot.
"""
