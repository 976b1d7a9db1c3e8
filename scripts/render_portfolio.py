#!/usr/bin/env python3
"""
Render index.html from projects.json. When the document is missing or
unrecognized, the account's public repositories are fetched directly
(without README or contributor enrichment).

Usage:
  python scripts/render_portfolio.py --username octocat --sort stars
"""

import sys

from portfolio_generator.controller import render_main


if __name__ == "__main__":
    sys.exit(render_main())
