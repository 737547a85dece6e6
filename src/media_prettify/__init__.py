"""Media Prettify -- clean titles from scene, P2P, and fansub media file names.

Core modules:
    prettify  -- Entry points: parse_name() (classify + rewrite) and prettify()
                 (full pipeline including enrichment and edition reattachment)
    classify  -- Ordered shape rules (season/episode, air date, year movies,
                 anime, marker-only movies); first match wins
    sanitize  -- Extension, release group tag, and end metadata stripping
    edition   -- Edition keyword extraction and reattachment
    casing    -- Punctuation normalization and lowercase-to-title-case
    enrich    -- Jaro-Winkler gated refinement from cached metadata (rapidfuzz)
    sorting   -- Sort keys for listings (group tags, separators, leading articles)
    cache     -- MetadataCache interface and SQLite MetadataStore with
                 background population
    patterns  -- All regular expressions, compiled once at import
    config    -- Configuration via pydantic-settings, loguru setup
    cli       -- Click CLI entry point

Subpackages:
    api -- External metadata clients (TMDb)
"""
