"""Pixel office: a tile-based office floor simulation for agent avatars."""
