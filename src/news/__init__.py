"""
News Module
===========

Daily news digest pipeline:
- Random country selection over a static site catalog
- Headline and article extraction (Firecrawl first, HTML scraping as fallback)
- LLM summaries
- Notion persistence
"""
