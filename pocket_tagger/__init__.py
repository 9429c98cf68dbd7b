"""
Pocket Tagger

Applies rule-based tags to unread articles saved in Pocket.

Architecture:
    Pocket (external) -> pocket_client -> tagger -> pocket_client

Components:
    - config: environment-driven settings
    - credentials: local credential store (~/.pocket/credentials)
    - pocket_client: HTTP client for the Pocket v3 API
    - tagger: fetch -> tag -> persist pipeline around an external engine
    - main: command line entry point
"""
