"""HomeFinder: conversation-aware natural-language property search."""
