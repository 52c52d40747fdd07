"""Digest generation: prompt building, Gemini client, reply parsing."""
