"""Version information for feedback-jira.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "1.1.0"

# Version history:
# 1.1.0 - Custom data rendering formats (bullets, codeBlock, hybrid)
# 1.0.0 - Initial release: issue creation with screenshot attachment
