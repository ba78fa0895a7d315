"""Input resolution: pointer gestures, key normalization, keyboard and mouse resolvers."""
