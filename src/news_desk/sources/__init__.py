"""Source adapters that turn external sites and APIs into content records."""
