"""
Website generator package
Renderer, crawler feeds and the site build orchestrator
"""
from website_generator.generator import BuildResult, WebsiteGenerator
from website_generator.renderer import PageRenderer

__all__ = ['BuildResult', 'PageRenderer', 'WebsiteGenerator']
