"""Exception hierarchy shared by the skillcheck modules"""


class SkillcheckError(Exception):
    """Base class for errors the CLI reports without a traceback"""


class SkillLoadError(SkillcheckError, ValueError):
    """A SKILL.md file could not be parsed"""


class ManifestError(SkillcheckError):
    """skills.json is missing, unreadable or does not match the schema"""


class HistoryError(SkillcheckError):
    """Git history for the manifest could not be read"""


class ConfigError(SkillcheckError):
    """.skillcheck.json is invalid"""


class ScaffoldError(SkillcheckError):
    """A new skill could not be created"""
