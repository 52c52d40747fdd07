"""Headless-browser extraction of blog listings and article pages."""
