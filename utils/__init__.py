"""
Utility modules: content presets, related-article ranking, affiliate links
"""
