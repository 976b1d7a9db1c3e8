#!/usr/bin/env python3
"""
Write projects.json for a GitHub account by listing its repositories and
enriching each with a README excerpt and its top contributors.

Usage:
  python scripts/generate_projects.py --username octocat --token YOUR_GITHUB_TOKEN

Environment variables:
  GITHUB_USERNAME: default for --username
  GITHUB_TOKEN: default for --token; without one, anonymous rate limits apply
"""

import sys

from portfolio_generator.controller import generate_main


if __name__ == "__main__":
    sys.exit(generate_main())
