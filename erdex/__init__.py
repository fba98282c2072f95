"""Transcode a compact game data snapshot into battle engine dex tables."""
